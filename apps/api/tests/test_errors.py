"""
Tests de ApiError.
No requieren base de datos, red ni variables de entorno.
"""

import copy
import pickle

import pytest

from core.errors import DEFAULT_ERROR_MESSAGE, ApiError

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def build_error_from_caller() -> ApiError:
    """Punto de llamada identificable en la traza capturada."""
    return ApiError(500)


class NotFoundError(ApiError):
    def __init__(self, message: str = "Not found") -> None:
        super().__init__(404, message)


# ===========================================================================
# Tests: construcción y valores por defecto
# ===========================================================================


class TestApiErrorFields:
    def test_example_payload(self):
        exc = ApiError(404, "Not found", [{"field": "id", "error": "missing"}])

        assert exc.to_dict() == {
            "statusCode": 404,
            "data": None,
            "message": "Not found",
            "success": False,
            "errors": [{"field": "id", "error": "missing"}],
        }

    def test_default_message(self):
        assert ApiError(500).message == "Something went wrong"
        assert DEFAULT_ERROR_MESSAGE == "Something went wrong"

    def test_falsy_message_uses_default(self):
        assert ApiError(400, "").message == DEFAULT_ERROR_MESSAGE
        assert ApiError(400, None).message == DEFAULT_ERROR_MESSAGE

    def test_default_errors_is_empty_list(self):
        exc = ApiError(400)
        assert exc.errors == []
        assert exc.errors is not None

    def test_default_errors_not_shared_between_instances(self):
        assert ApiError(400).errors is not ApiError(400).errors

    def test_errors_stored_as_given(self):
        details = [{"field": "email"}, "texto libre", 42]
        exc = ApiError(400, "Invalid input", details)
        assert exc.errors is details

    @pytest.mark.parametrize("status_code", [100, 200, 201, 302, 399, 400, 404, 500, 599])
    def test_success_is_always_false(self, status_code):
        assert ApiError(status_code).success is False

    def test_data_is_always_none(self):
        assert ApiError(200, "ok").data is None

    def test_data_cannot_be_passed(self):
        with pytest.raises(TypeError):
            ApiError(400, data={"id": 1})

    def test_missing_status_code_rejected(self):
        with pytest.raises(TypeError):
            ApiError(None)

    def test_str_is_message(self):
        assert str(ApiError(409, "Conflict")) == "Conflict"


# ===========================================================================
# Tests: traza de diagnóstico
# ===========================================================================


class TestApiErrorTrace:
    def test_custom_trace_is_stored_verbatim(self):
        exc = ApiError(500, trace="custom trace\n  at handler")
        assert exc.trace == "custom trace\n  at handler"

    def test_captured_trace_is_not_empty(self):
        exc = ApiError(500)
        assert isinstance(exc.trace, str)
        assert exc.trace != ""

    def test_captured_trace_points_at_caller(self):
        exc = build_error_from_caller()
        frames = [line for line in exc.trace.splitlines() if line.lstrip().startswith("File ")]
        assert frames[-1].endswith("in build_error_from_caller")

    def test_captured_trace_excludes_constructor(self):
        exc = ApiError(500)
        assert "in __init__" not in exc.trace
        assert "in _capture_trace" not in exc.trace

    def test_subclass_constructor_excluded_from_trace(self):
        exc = NotFoundError()
        assert exc.status_code == 404
        assert "in __init__" not in exc.trace
        assert "test_subclass_constructor_excluded_from_trace" in exc.trace

    def test_trace_not_in_client_payload(self):
        assert "trace" not in ApiError(500).to_dict()


# ===========================================================================
# Tests: inmutabilidad y raise
# ===========================================================================


class TestApiErrorBehaviour:
    @pytest.mark.parametrize("field", ["status_code", "data", "message", "success", "errors", "trace"])
    def test_fields_are_read_only(self, field):
        exc = ApiError(400, "Bad request")
        with pytest.raises(AttributeError):
            setattr(exc, field, "x")

    def test_can_be_raised_and_caught(self):
        with pytest.raises(ApiError) as info:
            raise ApiError(403, "Forbidden")

        assert info.value.status_code == 403
        assert info.value.message == "Forbidden"

    def test_shallow_copy_keeps_fields(self):
        exc = ApiError(404, "Not found", [{"field": "id", "error": "missing"}])
        clone = copy.copy(exc)

        assert clone.to_dict() == exc.to_dict()
        assert clone.trace == exc.trace
        assert clone.errors is exc.errors

    def test_deepcopy_keeps_fields(self):
        exc = ApiError(422, "Validation failed", [{"field": "email"}])
        clone = copy.deepcopy(exc)

        assert clone.to_dict() == exc.to_dict()
        assert clone.errors is not exc.errors

    def test_pickle_round_trip(self):
        exc = ApiError(404, "Not found", trace="custom trace")
        restored = pickle.loads(pickle.dumps(exc))

        assert isinstance(restored, ApiError)
        assert restored.status_code == 404
        assert restored.message == "Not found"
        assert restored.trace == "custom trace"
        assert restored.success is False

    def test_can_be_chained(self):
        try:
            try:
                raise KeyError("id")
            except KeyError as exc:
                raise ApiError(404, "Not found") from exc
        except ApiError as api_exc:
            assert isinstance(api_exc.__cause__, KeyError)
