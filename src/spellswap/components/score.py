from dataclasses import dataclass

@dataclass(slots=True)
class Score:
    value: int = 0

    def add(self, amount: int) -> None:
        if amount > 0:
            self.value += amount
