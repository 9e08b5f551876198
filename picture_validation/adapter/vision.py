from typing import Any

import httpx

from picture_validation.errors import UpstreamError

DETECT_PATH = "/vision/v3.2/detect"


async def detect_objects(
    resource_url: str,
    api_key: str,
    endpoint: str,
    timeout_s: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    headers = {
        "Ocp-Apim-Subscription-Key": api_key,
        "Content-Type": "application/json",
    }
    url = f"{endpoint.rstrip('/')}{DETECT_PATH}"
    try:
        async with httpx.AsyncClient(timeout=timeout_s, transport=transport) as client:
            response = await client.post(url, json={"url": resource_url}, headers=headers)
            response.raise_for_status()
            return response.json()
    except httpx.HTTPStatusError as exc:
        raise UpstreamError(
            f"vision service returned {exc.response.status_code}: {exc.response.text}"
        ) from exc
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
        raise UpstreamError(f"vision service request failed: {exc}") from exc
