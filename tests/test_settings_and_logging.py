import logging

import pytest
from pydantic import ValidationError

from mirrah import Reflection, ReflectionSettings, configure_logging
from mirrah.core.logger import LOGGER_NAMESPACE, get_logger


def _marked_handlers(logger: logging.Logger):
    return [h for h in logger.handlers if h.filters]


def test_settings_defaults():
    settings = ReflectionSettings()

    assert settings.force_access is True
    assert settings.import_fallback is True
    assert settings.validate_assignment is False
    assert settings.path_separator == "."
    assert settings.log_level is None


def test_settings_reject_unknown_keys():
    with pytest.raises(ValidationError):
        ReflectionSettings(force_acess=False)


def test_settings_reject_empty_path_separator():
    with pytest.raises(ValidationError) as exc:
        ReflectionSettings(path_separator="")

    assert "path_separator" in str(exc.value)


def test_settings_are_immutable():
    settings = ReflectionSettings()

    with pytest.raises(ValidationError):
        settings.force_access = False


def test_configure_logging_is_idempotent():
    configure_logging("INFO")
    configure_logging("INFO")

    package_logger = logging.getLogger(LOGGER_NAMESPACE)

    assert len(_marked_handlers(package_logger)) == 1


def test_reflection_applies_log_level():
    Reflection(ReflectionSettings(log_level="DEBUG"))
    assert logging.getLogger(LOGGER_NAMESPACE).level == logging.DEBUG

    Reflection()
    assert logging.getLogger(LOGGER_NAMESPACE).level == logging.DEBUG

    configure_logging("WARNING")
    assert logging.getLogger(LOGGER_NAMESPACE).level == logging.WARNING


def test_module_loggers_live_under_namespace():
    logger = get_logger("mirrah.reflection")

    assert logger.name.startswith(LOGGER_NAMESPACE)
    assert logger.getEffectiveLevel() == logging.getLogger(LOGGER_NAMESPACE).level
