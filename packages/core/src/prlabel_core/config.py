import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from prlabel_core.errors import ConfigurationError

DEFAULT_CONFIG: dict = {
    "waiting_for_review": "waiting-on-review",
    "ready_for_merge": "ready-to-merge",
    "waiting_for_author": "waiting-on-author",
    "ci_passed": "",  # empty = never touch a CI label
    "requires_description": False,
    "requires_review": None,  # unset = true, unless allow_merge_without_review says otherwise
    "allow_merge_without_review": None,
    "required_checks": "",  # empty = every check counts
    "include_check_runs": False,
    "fail_on_missing_description": True,
}

# GitHub Actions exposes `with:` inputs as INPUT_<NAME> environment variables.
ACTION_INPUTS: dict[str, str] = {
    "INPUT_WAITINGFORREVIEW": "waiting_for_review",
    "INPUT_READYFORMERGE": "ready_for_merge",
    "INPUT_WAITINGFORAUTHOR": "waiting_for_author",
    "INPUT_CIPASSED": "ci_passed",
    "INPUT_REQUIREDESCRIPTION": "requires_description",
    "INPUT_REQUIREREVIEW": "requires_review",
    "INPUT_ALLOWMERGEWITHOUTREVIEW": "allow_merge_without_review",
    "INPUT_REQUIREDCHECKS": "required_checks",
    "INPUT_INCLUDECHECKRUNS": "include_check_runs",
    "INPUT_FAILONMISSINGDESCRIPTION": "fail_on_missing_description",
}

_MAX_LABEL_LENGTH = 50
_TRUE_STRINGS = {"true", "yes", "on"}
_FALSE_STRINGS = {"false", "no", "off"}


def load_config(
    config_path: str = ".prlabel.yml",
    environ: Optional[dict] = None,
    cli_overrides: Optional[dict] = None,
) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prlabel.yml in the current directory
      3. GitHub Action inputs (INPUT_* environment variables)
      4. CLI argument overrides

    ``requires_review`` and ``allow_merge_without_review`` are resolved layer
    by layer, so a later layer can flip the setting through either name.
    """
    env = os.environ if environ is None else environ
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            try:
                file_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"{config_path} is not valid YAML: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"{config_path} must contain a mapping, got {type(file_config).__name__}")
        _merge_layer(config, file_config)

    inputs = {}
    for var, key in ACTION_INPUTS.items():
        value = env.get(var, "")
        if value.strip():
            inputs[key] = value
    _merge_layer(config, inputs)

    if cli_overrides:
        _merge_layer(config, {key: value for key, value in cli_overrides.items() if value is not None})

    config["github_token"] = env.get("GITHUB_TOKEN") or env.get("INPUT_GITHUB_TOKEN")

    return config


def to_bool(value, name: str = "value") -> bool:
    """Parse a boolean flag the way Action inputs spell them.

    Accepts real booleans, integers, true/false/yes/no/on/off and integer
    strings (non-zero is true). Anything else is a ConfigurationError.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        try:
            return int(text) != 0
        except ValueError:
            pass
    raise ConfigurationError(f"{name}: expected a boolean, got {value!r}")


def parse_label_list(value, name: str = "labels") -> tuple[str, ...]:
    """Parse a comma-delimited string (or YAML list) into an ordered tuple of names.

    Whitespace around names is stripped, empty entries and duplicates dropped.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        raise ConfigurationError(f"{name}: expected a comma-separated string or a list, got {value!r}")

    labels: list[str] = []
    for item in items:
        if not isinstance(item, str):
            raise ConfigurationError(f"{name}: label names must be strings, got {item!r}")
        label = item.strip()
        if not label or label in labels:
            continue
        if len(label) > _MAX_LABEL_LENGTH:
            raise ConfigurationError(f"{name}: label {label!r} is longer than {_MAX_LABEL_LENGTH} characters")
        if any(not ch.isprintable() for ch in label):
            raise ConfigurationError(f"{name}: label {label!r} contains control characters")
        labels.append(label)
    return tuple(labels)


def _resolve_requires_review(config: dict) -> bool:
    requires = config.get("requires_review")
    allow_without = config.get("allow_merge_without_review")
    if allow_without is None:
        return True if requires is None else to_bool(requires, "requires_review")

    allowed = to_bool(allow_without, "allow_merge_without_review")
    if requires is not None and to_bool(requires, "requires_review") == allowed:
        raise ConfigurationError("requires_review and allow_merge_without_review contradict each other")
    return not allowed


def _merge_layer(config: dict, layer: dict) -> None:
    """Apply one config layer, folding ``allow_merge_without_review`` into ``requires_review``.

    Both names are only checked against each other within the same layer.
    """
    layer = dict(layer)
    if layer.get("requires_review") is not None or layer.get("allow_merge_without_review") is not None:
        config["requires_review"] = _resolve_requires_review(layer)
        config["allow_merge_without_review"] = None
        layer.pop("requires_review", None)
        layer.pop("allow_merge_without_review", None)
    config.update(layer)


@dataclass(frozen=True)
class LabelConfiguration:
    waiting_for_review: tuple[str, ...]
    ready_for_merge: tuple[str, ...]
    waiting_for_author: tuple[str, ...]
    ci_passed: tuple[str, ...] = ()
    requires_description: bool = False
    requires_review: bool = True
    required_checks: tuple[str, ...] = ()
    include_check_runs: bool = False
    fail_on_missing_description: bool = True

    @classmethod
    def from_config(cls, config: dict) -> "LabelConfiguration":
        """Validate a merged config dict and freeze it for the run."""
        requires_review = _resolve_requires_review(config)

        cfg = cls(
            waiting_for_review=parse_label_list(config.get("waiting_for_review"), "waiting_for_review"),
            ready_for_merge=parse_label_list(config.get("ready_for_merge"), "ready_for_merge"),
            waiting_for_author=parse_label_list(config.get("waiting_for_author"), "waiting_for_author"),
            ci_passed=parse_label_list(config.get("ci_passed"), "ci_passed"),
            requires_description=to_bool(config.get("requires_description", False), "requires_description"),
            requires_review=requires_review,
            required_checks=parse_label_list(config.get("required_checks"), "required_checks"),
            include_check_runs=to_bool(config.get("include_check_runs", False), "include_check_runs"),
            fail_on_missing_description=to_bool(
                config.get("fail_on_missing_description", True), "fail_on_missing_description"
            ),
        )
        cfg._check_disjoint()
        return cfg

    def _check_disjoint(self) -> None:
        groups = {
            "waiting_for_review": self.waiting_for_review,
            "ready_for_merge": self.ready_for_merge,
            "waiting_for_author": self.waiting_for_author,
            "ci_passed": self.ci_passed,
        }
        seen: dict[str, str] = {}
        for group, labels in groups.items():
            for label in labels:
                if label in seen:
                    raise ConfigurationError(f"label {label!r} is configured in both {seen[label]} and {group}")
                seen[label] = group
