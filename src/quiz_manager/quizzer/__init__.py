from ._main import build_arg_parser
from .config import (
    ConfigOverrides,
    LoadResult,
    QuizConfig,
    QuizConfigError,
    load_config,
)
from .engine import (
    COMMANDS,
    CommandEngine,
    CommandSpec,
    PlayResult,
    PlayState,
    PlayStep,
    advance_play,
    resolve_command,
    start_play,
)
from .errors import (
    EmptyCollectionError,
    InvalidParameterError,
    MissingParameterError,
    QuizError,
    QuizNotFoundError,
    QuizValidationError,
    StorageError,
)
from .manager.quiz import (
    DEFAULT_QUIZZES,
    JsonQuizRepository,
    QuizRepository,
    validate_quiz_fields,
)
from .models import Quiz
from .prompt import ConsolePrompter
from .session import QuizShell, parse_command_line
from .utils import answers_match, validate_id

__all__ = [
    "build_arg_parser",
    "ConfigOverrides",
    "LoadResult",
    "QuizConfig",
    "QuizConfigError",
    "load_config",
    "COMMANDS",
    "CommandEngine",
    "CommandSpec",
    "PlayResult",
    "PlayState",
    "PlayStep",
    "advance_play",
    "resolve_command",
    "start_play",
    "EmptyCollectionError",
    "InvalidParameterError",
    "MissingParameterError",
    "QuizError",
    "QuizNotFoundError",
    "QuizValidationError",
    "StorageError",
    "DEFAULT_QUIZZES",
    "JsonQuizRepository",
    "QuizRepository",
    "validate_quiz_fields",
    "Quiz",
    "ConsolePrompter",
    "QuizShell",
    "parse_command_line",
    "answers_match",
    "validate_id",
]
