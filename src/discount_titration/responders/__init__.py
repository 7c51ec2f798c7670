"""Built-in responders that present trials and return choices."""

from .console import ConsoleResponder, create_console_responder
from .discounting import HyperbolicResponder, create_hyperbolic_responder
from .fixed_sequence import FixedSequenceResponder, create_fixed_sequence_responder
from .random_choice import RandomResponder, create_random_responder

__all__ = [
    "ConsoleResponder",
    "FixedSequenceResponder",
    "HyperbolicResponder",
    "RandomResponder",
    "create_console_responder",
    "create_fixed_sequence_responder",
    "create_hyperbolic_responder",
    "create_random_responder",
]
