import asyncio
from typing import Any, Dict, Optional

import httpx

from constants import EXECUTION_API_URL, EXECUTION_TIMEOUT_SECONDS
from exceptions import UpstreamFailure
from logging_config import get_logger

logger = get_logger(__name__)


def error_response(message: str) -> Dict[str, Any]:
    return {"run": {"output": f"Error: {message}"}}


def extract_output(response: Dict[str, Any]) -> str:
    run = response.get("run") if isinstance(response, dict) else None
    if not isinstance(run, dict):
        return ""
    output = run.get("output")
    return output if isinstance(output, str) else ""


class ExecutionProxy:
    """Forwards code to a Piston-compatible execution service.

    One attempt per request, bounded by ``timeout`` seconds. ``execute`` never
    raises: provider failures come back as ``{"run": {"output": "Error: ..."}}``.
    """

    def __init__(
        self,
        api_url: str = EXECUTION_API_URL,
        timeout: float = EXECUTION_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url
        self.timeout = timeout
        self.transport = transport

    async def _post(self, payload: Dict[str, Any]) -> Any:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(self.api_url, json=payload)
            response.raise_for_status()
            return response.json()

    async def _submit(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            # httpx times each connect/read step; this bounds the whole call
            data = await asyncio.wait_for(self._post(payload), self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise UpstreamFailure(f"timeout of {self.timeout:g}s exceeded") from e
        except httpx.HTTPStatusError as e:
            raise UpstreamFailure(f"execution service returned status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise UpstreamFailure(str(e) or e.__class__.__name__) from e
        except ValueError as e:
            raise UpstreamFailure("execution service returned an invalid response") from e

        if not isinstance(data, dict):
            raise UpstreamFailure("execution service returned an invalid response")
        return data

    async def execute(self, code: str, language: str, version: str, stdin: Optional[str] = None) -> Dict[str, Any]:
        payload = {
            "language": language,
            "version": version,
            "files": [{"content": code}],
            "stdin": stdin or "",
        }
        logger.debug(f"Submitting {language} {version} code to {self.api_url}")
        try:
            result = await self._submit(payload)
        except UpstreamFailure as e:
            logger.error(f"Compile error: {e}")
            return error_response(str(e))
        logger.info(f"Execution finished for {language} {version}")
        return result
