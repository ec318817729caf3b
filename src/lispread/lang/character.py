import attr

_CHAR_NAMES = {" ": "space", "\n": "newline"}


@attr.frozen(repr=False)
class Character:
    codepoint: int

    @property
    def char(self) -> str:
        return chr(self.codepoint)

    def __repr__(self):
        c = self.char
        return f"#\\{_CHAR_NAMES.get(c, c)}"


def character(c: str) -> Character:
    """Create a character from a one character string."""
    return Character(ord(c))
