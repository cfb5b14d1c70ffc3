from dataclasses import dataclass

@dataclass(slots=True)
class DropLock:
    """Tag component pinning a cell in place for the next drop only.

    Added to freshly spawned specials that have nothing empty beneath them;
    GravitySystem removes every DropLock once the drop has run.
    """
    pass
