from santa_draw.services.cycles import extract_cycles
from santa_draw.services.draw import perform_circular_draw, perform_multi_cycle_draw
from santa_draw.services.feasibility import Infeasibility, ValidationResult, validate
from santa_draw.services.group_flow import DrawError, DuplicateParticipantError, GroupError

__all__ = [
    "DrawError",
    "DuplicateParticipantError",
    "GroupError",
    "Infeasibility",
    "ValidationResult",
    "extract_cycles",
    "perform_circular_draw",
    "perform_multi_cycle_draw",
    "validate",
]
