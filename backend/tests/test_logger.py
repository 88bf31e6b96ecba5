import json
import logging

from rich.logging import RichHandler

from utils.logger import _console_handler, _json_handler, get_logger


def test_json_records_carry_level_and_logger():
    handler = _json_handler()
    record = logging.LogRecord("InterviewService", logging.INFO, __file__, 1, "Interview %s started", ("abc",), None)

    payload = json.loads(handler.format(record))
    assert payload["message"] == "Interview abc started"
    assert payload["levelname"] == "INFO"
    assert payload["name"] == "InterviewService"


def test_console_handler_uses_rich():
    assert isinstance(_console_handler(), RichHandler)


def test_default_logger_name():
    assert get_logger().name == "interview-backend"
    assert get_logger("CandidateRoutes") is logging.getLogger("CandidateRoutes")
