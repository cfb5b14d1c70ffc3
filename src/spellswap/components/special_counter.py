from dataclasses import dataclass

@dataclass(slots=True)
class SpecialCounter:
    """Per-board source of special tile identities.

    Identities are strictly increasing and never handed out twice.
    """
    next_uid: int = 1

    def mint(self) -> int:
        uid = self.next_uid
        self.next_uid += 1
        return uid
