# tests/modwarp/core/test_jsonutils.py
import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel

from modwarp.core.jsonutils import safeJsonDumps, serializeError, tryJSONify


class Color(Enum):
    RED = "red"


class Point(BaseModel):
    x: int
    y: int


def _raise(exc: BaseException) -> BaseException:
    try:
        raise exc
    except BaseException as err:
        return err


def _raiseFrom(fn, *args) -> BaseException:
    try:
        fn(*args)
    except Exception as err:
        return err
    raise AssertionError("expected an exception")


def test_safeJsonDumps_pydanticModel():
    assert safeJsonDumps(Point(x=1, y=2)) == '{"x":1,"y":2}'


def test_safeJsonDumps_fallsBackForUnserializable():
    payload = {"path": Path("a/b"), "color": Color.RED, "items": {3}}

    assert json.loads(safeJsonDumps(payload)) == {"path": str(Path("a/b")), "color": "red", "items": [3]}


def test_tryJSONify_circularReference():
    loop: list = []
    loop.append(loop)

    assert tryJSONify(loop) == ["<circular_ref list>"]


def test_serializeError_basicShapes():
    assert serializeError(None) == {}
    assert serializeError("plain") == {"message": "plain"}
    assert serializeError(42) == {"type": "int", "repr": "42"}


def test_serializeError_exceptionWithCause():
    cause = _raise(KeyError("inner"))
    try:
        raise RuntimeError("outer") from cause
    except RuntimeError as err:
        data = serializeError(err)

    assert data["type"] == "RuntimeError"
    assert data["message"] == "outer"
    assert data["args"] == ["'outer'"]
    assert "raise RuntimeError" in data["stack"]
    assert data["cause"] == {"type": "KeyError", "message": "'inner'"}


def test_serializeError_truncatesLongStacks():
    def recurse(depth: int) -> None:
        if depth == 0:
            raise ValueError("deep")
        recurse(depth - 1)

    err = _raiseFrom(recurse, 50)
    data = serializeError(err, limit=500)

    assert data["stack"].startswith("[TRUNCATED]")
    assert len(data["stack"]) <= 500 + len("[TRUNCATED]")
    assert "raise ValueError" in data["stack"]