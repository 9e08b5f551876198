import pytest
from fastapi.testclient import TestClient

from picture_validation.config import Settings
from picture_validation.errors import ConfigurationError, ValidationError
from picture_validation.main import create_app
from picture_validation.services.upload_service import validate_request

STORAGE_MESSAGE = (
    "Storage isn't configured correctly - get Storage Connection string from Azure portal"
)


@pytest.mark.parametrize(
    ("params", "kwargs", "message"),
    [
        ({"filename": "photo.jpg"}, {"content": b"data"}, "robotName is not defined"),
        ({"robotName": "R2D2"}, {"content": b"data"}, "filename is not defined"),
        ({"robotName": "", "filename": "photo.jpg"}, {"content": b"data"}, "robotName is not defined"),
        ({"robotName": "R2D2", "filename": "photo.jpg"}, {}, "Request body is not defined"),
        (
            {"robotName": "R2D2", "filename": "photo.jpg"},
            {"content": b"data"},
            "Content type is not sent in header 'content-type'",
        ),
    ],
)
def test_missing_fields_return_server_error(test_settings, storage, params, kwargs, message) -> None:
    client = TestClient(create_app(settings=test_settings, storage=storage))

    response = client.post("/upload", params=params, **kwargs)

    assert response.status_code == 500
    assert response.text == message
    assert storage.writes == []


def test_production_requires_storage_connection(storage) -> None:
    settings = Settings(environment="Production", storage_connection_string="short")
    client = TestClient(create_app(settings=settings, storage=storage))

    response = client.post(
        "/upload",
        params={"robotName": "R2D2", "filename": "photo.jpg"},
        files={"file": ("photo.jpg", b"\xff\xd8", "image/jpeg")},
    )

    assert response.status_code == 500
    assert response.text == STORAGE_MESSAGE
    assert storage.writes == []


def test_validate_request_checks_fields_in_order(test_settings) -> None:
    with pytest.raises(ValidationError, match="robotName is not defined"):
        validate_request(None, None, None, None, test_settings)
    with pytest.raises(ValidationError, match="filename is not defined"):
        validate_request("R2D2", None, None, None, test_settings)
    with pytest.raises(ValidationError, match="Request body is not defined"):
        validate_request("R2D2", "photo.jpg", b"", None, test_settings)


def test_validate_request_passes_outside_production_without_storage(test_settings) -> None:
    validate_request("R2D2", "photo.jpg", b"data", "multipart/form-data; boundary=x", test_settings)


def test_validate_request_accepts_configured_production() -> None:
    settings = Settings(
        environment="Production",
        storage_connection_string="DefaultEndpointsProtocol=https;AccountName=robotica",
    )
    validate_request("R2D2", "photo.jpg", b"data", "multipart/form-data; boundary=x", settings)


def test_validate_request_rejects_missing_production_storage() -> None:
    settings = Settings(environment="Production", storage_connection_string="")
    with pytest.raises(ConfigurationError) as excinfo:
        validate_request("R2D2", "photo.jpg", b"data", "multipart/form-data; boundary=x", settings)
    assert excinfo.value.status_code == 500
