import logging
import os
from dataclasses import dataclass
from typing import Any

import requests

from golfcore.models import HoleDefinition, TeeRating

logger = logging.getLogger(__name__)
API_BASE = "https://api.golfcourseapi.com/v1"


class CourseApiError(Exception):
    pass


@dataclass(frozen=True)
class CourseTee:
    tee_name: str
    gender: str
    holes: list[HoleDefinition]
    rating: TeeRating | None


def _headers(api_key: str) -> dict[str, str]:
    key = api_key or os.getenv("GOLF_API_KEY", "")
    if not key:
        raise CourseApiError("Missing Golf Course API key.")
    return {"Authorization": f"Key {key}"}


def search_courses(query: str, api_key: str) -> dict[str, Any]:
    if not query:
        return {"courses": []}
    response = requests.get(
        f"{API_BASE}/search",
        params={"search_query": query},
        headers=_headers(api_key),
        timeout=15,
    )
    if response.status_code != 200:
        logger.warning("Course search for %r failed with %s", query, response.status_code)
        raise CourseApiError(f"Search failed: {response.status_code} {response.text}")
    return response.json()


def fetch_course(course_id: int, api_key: str) -> dict[str, Any]:
    response = requests.get(
        f"{API_BASE}/courses/{course_id}",
        headers=_headers(api_key),
        timeout=20,
    )
    if response.status_code != 200:
        logger.warning("Course fetch for id %s failed with %s", course_id, response.status_code)
        raise CourseApiError(f"Course fetch failed: {response.status_code} {response.text}")
    payload = response.json()
    if not isinstance(payload, dict) or "course" not in payload:
        raise CourseApiError(
            f"Course fetch returned unexpected payload for id {course_id}: {response.text}"
        )
    course = payload["course"]
    if not isinstance(course, dict) or "id" not in course:
        raise CourseApiError(
            f"Course fetch returned unexpected course data for id {course_id}: {response.text}"
        )
    return course


def _hole_definitions(tee: dict[str, Any]) -> list[HoleDefinition]:
    holes = []
    for idx, hole in enumerate(tee.get("holes") or [], 1):
        holes.append(
            HoleDefinition(
                hole_number=hole.get("hole_number") or idx,
                par=hole.get("par") or 4,
                stroke_index=hole.get("handicap") or idx,
                yardage=hole.get("yardage"),
            )
        )
    return holes


def _tee_rating(tee: dict[str, Any], holes: list[HoleDefinition]) -> TeeRating | None:
    slope = tee.get("slope_rating")
    rating = tee.get("course_rating")
    if not slope or not rating:
        return None
    total_par = tee.get("par_total") or sum(hole.par for hole in holes)
    return TeeRating(slope_rating=int(slope), course_rating=float(rating), total_par=int(total_par))


def course_tees(course: dict[str, Any]) -> list[CourseTee]:
    """Hole layout and rating for every tee in a course payload."""
    tees_payload = course.get("tees") or {}
    tees: list[CourseTee] = []
    for gender in ("male", "female"):
        for tee in tees_payload.get(gender, []) or []:
            holes = _hole_definitions(tee)
            tees.append(
                CourseTee(
                    tee_name=tee.get("tee_name") or "",
                    gender=gender,
                    holes=holes,
                    rating=_tee_rating(tee, holes),
                )
            )
    return tees


def fetch_course_tees(course_id: int, api_key: str) -> list[CourseTee]:
    return course_tees(fetch_course(course_id, api_key))
