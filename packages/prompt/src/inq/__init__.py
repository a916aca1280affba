"""inq - the core of an interactive question prompt."""

from inq.config import PromptDefaults, QuestionConfig, resolve_question
from inq.errors import ConfigurationError, FilterError, ValidationFailure
from inq.model import Outcome, PromptStatus
from inq.pipeline import OutcomeStream, SubmissionPipeline, SubmitEvents
from inq.prompt import BasePrompt, PromptDriver

__version__ = "0.1.0"

__all__ = [
    "BasePrompt",
    "PromptDriver",
    "PromptStatus",
    "QuestionConfig",
    "PromptDefaults",
    "resolve_question",
    "SubmissionPipeline",
    "SubmitEvents",
    "OutcomeStream",
    "Outcome",
    "ConfigurationError",
    "FilterError",
    "ValidationFailure",
]
