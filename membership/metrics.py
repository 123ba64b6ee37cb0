from fastapi import APIRouter
from starlette.responses import Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST, Counter

router = APIRouter()

# incremented by the student service after each committed write
STUDENT_WRITES = Counter(
    "student_writes_total", "Committed student writes", ["operation"]
)
MEMBERSHIP_RENEWALS = Counter("membership_renewals_total", "Membership renewals")


@router.get("/metrics")
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
