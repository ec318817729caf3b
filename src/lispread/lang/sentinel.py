import attr


@attr.define(eq=False, repr=False, frozen=True)
class Sentinel:
    """Distinguished singleton value compared by identity."""

    name: str

    def __repr__(self):
        return self.name


NIL = Sentinel("()")
TRUE = Sentinel("#t")
FALSE = Sentinel("#f")
UNSPECIFIED = Sentinel("#<unspecified>")
EOS = Sentinel("#<eos>")
LOGICAL_EOF = Sentinel("#<eof>")
