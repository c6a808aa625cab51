# app/utils/api_client.py
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass
class EditorContext:
    """Everything a client-side component needs to talk to the backend"""

    backend_url: str
    get_token: Callable[[], Awaitable[str]]
    timeout: float = 15.0
    transport: Optional[httpx.AsyncBaseTransport] = None


class CourseApiClient:
    """Async client for the marketplace API, returning its JSON envelopes"""

    def __init__(self, context: EditorContext):
        self.context = context

    async def _request(
        self, method: str, path: str, json: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        token = await self.context.get_token()
        try:
            async with httpx.AsyncClient(
                base_url=self.context.backend_url,
                timeout=self.context.timeout,
                transport=self.context.transport,
            ) as client:
                response = await client.request(
                    method,
                    path,
                    json=json,
                    headers={"Authorization": f"Bearer {token}"},
                )
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            return {"success": False, "message": str(e)}

        try:
            return response.json()
        except ValueError:
            return {
                "success": False,
                "message": f"Unexpected response ({response.status_code})",
            }

    async def create_course(self, document: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/api/educator/add-course", json=document)

    async def get_course(self, course_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/api/course/{course_id}")

    async def get_progress(self, course_id: int) -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/user/get-course-progress", json={"course_id": course_id}
        )

    async def mark_lecture_complete(
        self, course_id: int, lecture_id: str
    ) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/api/user/update-course-progress",
            json={"course_id": course_id, "lecture_id": lecture_id},
        )

    async def rate_course(self, course_id: int, rating: int) -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/user/add-rating", json={"course_id": course_id, "rating": rating}
        )

    async def fetch_player_data(self, course_id: int) -> Dict[str, Any]:
        """Course detail and progress, fetched concurrently"""
        course_res, progress_res = await asyncio.gather(
            self.get_course(course_id), self.get_progress(course_id)
        )
        return {
            "course": course_res.get("course") if course_res.get("success") else None,
            "progress": (
                progress_res.get("progress_data")
                if progress_res.get("success")
                else None
            ),
        }
