"""Gates — индивидуальные гейты валидатора транзакций.

- GATE 0: Success status
- GATE 1: Sender exclusion (sender != target)
- GATE 2: Structural shape (плоский перевод, pure inputs)
- GATE 3: Address presence (target среди address inputs)
- GATE 4: Balance-change invariant (|sender| - gas == |target|)
"""

from .gate_00_success_status import Gate00SuccessStatus, Gate00Result
from .gate_01_sender_exclusion import Gate01SenderExclusion, Gate01Result
from .gate_02_structural_shape import Gate02StructuralShape, Gate02Result, Gate02Config
from .gate_03_address_presence import Gate03AddressPresence, Gate03Result
from .gate_04_balance_changes import Gate04BalanceChanges, Gate04Result, Gate04Config

__all__ = [
    "Gate00SuccessStatus",
    "Gate00Result",
    "Gate01SenderExclusion",
    "Gate01Result",
    "Gate02StructuralShape",
    "Gate02Result",
    "Gate02Config",
    "Gate03AddressPresence",
    "Gate03Result",
    "Gate04BalanceChanges",
    "Gate04Result",
    "Gate04Config",
]
