"""stalestate - quorum-verified staleness checks for polled, eventually consistent data."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("stalestate")
except PackageNotFoundError:
    __version__ = "0+local"
from stalestate.comparators import compare_by, compare_field
from stalestate.config import StaleConfig
from stalestate.exceptions import (
    ConfigurationError,
    ConsensusInconclusive,
    RequestError,
    StaleError,
)
from stalestate.interfaces import Comparator, DataSource, ErrorHandler, Sink
from stalestate.models import Outcome, Resolution, Tally
from stalestate.outcome import OutcomeSink
from stalestate.policy import has_majority, majority_threshold, resolve_verification
from stalestate.scheduler import IntervalPoller
from stalestate.sources import HttpJsonSource
from stalestate.stale import Callbacks, Stale

__all__ = [
    "__version__",
    "Callbacks",
    "Comparator",
    "ConfigurationError",
    "ConsensusInconclusive",
    "DataSource",
    "ErrorHandler",
    "HttpJsonSource",
    "IntervalPoller",
    "Outcome",
    "OutcomeSink",
    "RequestError",
    "Resolution",
    "Sink",
    "Stale",
    "StaleConfig",
    "StaleError",
    "Tally",
    "compare_by",
    "compare_field",
    "has_majority",
    "majority_threshold",
    "resolve_verification",
]
