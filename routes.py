from typing import Any, List, Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from alignment.landmark_aligner import LandmarkAligner
from config import DEFAULT_TRANSFORM_MODE, LOGS_DIR, MAX_FIDUCIALS_PER_LIST
from logger.backend_logger import backend_logger
from logger.frontend_logger import SessionLogBuffer
from registration_wizard import FiducialRegistrationWizard
from session.session_manager import session_manager

router = APIRouter()

# Stateless, so a single instance serves every request
landmark_aligner = LandmarkAligner()


class AlignRequest(BaseModel):
    from_points: Optional[List[List[float]]] = None
    to_points: Optional[List[List[float]]] = None
    # Not constrained to str: unrecognized values fall back to rigid body
    transform_type: Optional[Any] = DEFAULT_TRANSFORM_MODE


class FiducialListCreate(BaseModel):
    name: str
    points: Optional[List[List[float]]] = None


class FiducialCreate(BaseModel):
    position: List[float]
    label: Optional[str] = None


class ActiveListRequest(BaseModel):
    list_id: Optional[str] = None


class TransformCreate(BaseModel):
    name: str
    matrix: Optional[List[List[float]]] = None
    parent_id: Optional[str] = None


class TransformUpdate(BaseModel):
    matrix: List[List[float]]


class ProbeCaptureRequest(BaseModel):
    probe_transform_id: str


class RegisterRequest(BaseModel):
    from_list_id: Optional[str] = None
    to_list_id: Optional[str] = None
    output_transform_id: Optional[str] = None
    transform_type: Optional[Any] = Field(default=DEFAULT_TRANSFORM_MODE)


def check_point_limit(points: Optional[List[List[float]]]):
    if points is not None and len(points) > MAX_FIDUCIALS_PER_LIST:
        raise HTTPException(400, f"Too many points ({len(points)}). Maximum per list: {MAX_FIDUCIALS_PER_LIST}.")


def require_session(session_id: str) -> FiducialRegistrationWizard:
    wizard = session_manager.get(session_id)
    if wizard is None:
        raise HTTPException(404, f"Session {session_id} not found.")
    return wizard


@router.post("/align")
async def align_points(request: AlignRequest):
    """Align two point sets without storing anything"""
    try:
        check_point_limit(request.from_points)
        check_point_limit(request.to_points)
        result = landmark_aligner.align(request.from_points, request.to_points, request.transform_type)
        if not result.succeeded:
            return JSONResponse(result.to_dict(), status_code=422)
        return JSONResponse(result.to_dict())
    except HTTPException as e:
        backend_logger.error(f"Alignment request rejected: {e.detail}")
        raise e
    except ValueError as e:
        backend_logger.error(f"Alignment input error: {e}")
        raise HTTPException(400, str(e))
    except Exception as e:
        backend_logger.error(f"Unexpected error during alignment: {e}", exc_info=True)
        raise HTTPException(500, f"Internal server error during alignment: {e}")


@router.post("/sessions/{session_id}/fiducial_lists")
async def create_fiducial_list(session_id: str, request: FiducialListCreate):
    """Create a fiducial list, optionally pre-filled with points"""
    try:
        check_point_limit(request.points)
        wizard = session_manager.get_or_create(session_id)
        fiducial_list = wizard.add_fiducial_list(request.name, request.points)
        return JSONResponse({"status": "success", "fiducial_list": fiducial_list.to_dict()})
    except HTTPException as e:
        backend_logger.error(f"Fiducial list creation error for session {session_id}: {e.detail}")
        raise e
    except ValueError as e:
        backend_logger.error(f"Invalid fiducial list for session {session_id}: {e}")
        raise HTTPException(400, str(e))
    except Exception as e:
        backend_logger.error(f"Unexpected error creating fiducial list for session {session_id}: {e}", exc_info=True)
        raise HTTPException(500, f"Internal server error creating fiducial list: {e}")


@router.get("/sessions/{session_id}/fiducial_lists/{list_id}")
async def get_fiducial_list(session_id: str, list_id: str):
    wizard = require_session(session_id)
    fiducial_list = wizard.get_fiducial_list(list_id)
    if fiducial_list is None:
        raise HTTPException(404, f"Fiducial list {list_id} not found.")
    return JSONResponse({"status": "success", "fiducial_list": fiducial_list.to_dict()})


@router.post("/sessions/{session_id}/fiducial_lists/{list_id}/fiducials")
async def add_fiducial(session_id: str, list_id: str, request: FiducialCreate):
    """Append one fiducial to a list"""
    try:
        wizard = require_session(session_id)
        fiducial_list = wizard.get_fiducial_list(list_id)
        if fiducial_list is None:
            raise HTTPException(404, f"Fiducial list {list_id} not found.")
        if fiducial_list.number_of_fiducials >= MAX_FIDUCIALS_PER_LIST:
            raise HTTPException(400, f"Fiducial list {list_id} is full (max {MAX_FIDUCIALS_PER_LIST}).")
        fiducial = fiducial_list.add_fiducial(request.position, request.label)
        return JSONResponse({"status": "success", "fiducial": fiducial.to_dict(), "index": fiducial_list.number_of_fiducials - 1})
    except HTTPException as e:
        backend_logger.error(f"Add fiducial error for session {session_id}: {e.detail}")
        raise e
    except ValueError as e:
        backend_logger.error(f"Invalid fiducial for session {session_id}: {e}")
        raise HTTPException(400, str(e))
    except Exception as e:
        backend_logger.error(f"Unexpected error adding fiducial for session {session_id}: {e}", exc_info=True)
        raise HTTPException(500, f"Internal server error adding fiducial: {e}")


@router.put("/sessions/{session_id}/active_list")
async def set_active_list(session_id: str, request: ActiveListRequest):
    """Select the list that receives probe captures"""
    wizard = require_session(session_id)
    if request.list_id is not None and wizard.get_fiducial_list(request.list_id) is None:
        raise HTTPException(404, f"Fiducial list {request.list_id} not found.")
    wizard.set_active_list(request.list_id)
    return JSONResponse({"status": "success", "active_list_id": wizard.active_list_id})


@router.post("/sessions/{session_id}/transforms")
async def create_transform(session_id: str, request: TransformCreate):
    try:
        wizard = session_manager.get_or_create(session_id)
        transform = wizard.add_transform(request.name, request.matrix, request.parent_id)
        return JSONResponse({"status": "success", "transform": transform.to_dict()})
    except KeyError as e:
        backend_logger.error(f"Transform creation error for session {session_id}: {e}")
        raise HTTPException(404, f"Parent transform {request.parent_id} not found.")
    except ValueError as e:
        backend_logger.error(f"Invalid transform for session {session_id}: {e}")
        raise HTTPException(400, str(e))
    except Exception as e:
        backend_logger.error(f"Unexpected error creating transform for session {session_id}: {e}", exc_info=True)
        raise HTTPException(500, f"Internal server error creating transform: {e}")


@router.get("/sessions/{session_id}/transforms/{transform_id}")
async def get_transform(session_id: str, transform_id: str):
    wizard = require_session(session_id)
    transform = wizard.get_transform(transform_id)
    if transform is None:
        raise HTTPException(404, f"Transform {transform_id} not found.")
    return JSONResponse({"status": "success", "transform": transform.to_dict()})


@router.put("/sessions/{session_id}/transforms/{transform_id}")
async def update_transform(session_id: str, transform_id: str, request: TransformUpdate):
    """Replace a transform's matrix, e.g. with a new tracked probe pose"""
    try:
        wizard = require_session(session_id)
        if wizard.get_transform(transform_id) is None:
            raise HTTPException(404, f"Transform {transform_id} not found.")
        transform = wizard.set_transform_matrix(transform_id, request.matrix)
        return JSONResponse({"status": "success", "transform": transform.to_dict()})
    except HTTPException as e:
        backend_logger.error(f"Transform update error for session {session_id}: {e.detail}")
        raise e
    except ValueError as e:
        backend_logger.error(f"Invalid transform matrix for session {session_id}: {e}")
        raise HTTPException(400, str(e))
    except Exception as e:
        backend_logger.error(f"Unexpected error updating transform for session {session_id}: {e}", exc_info=True)
        raise HTTPException(500, f"Internal server error updating transform: {e}")


@router.post("/sessions/{session_id}/probe_capture")
async def probe_capture(session_id: str, request: ProbeCaptureRequest):
    """Add the current probe tip position to the active fiducial list"""
    try:
        wizard = require_session(session_id)
        probe_transform = wizard.get_transform(request.probe_transform_id)
        if probe_transform is None:
            raise HTTPException(404, f"Probe transform {request.probe_transform_id} not found.")
        if wizard.active_list is None:
            raise HTTPException(409, "No active fiducial list selected.")
        if wizard.active_list.number_of_fiducials >= MAX_FIDUCIALS_PER_LIST:
            raise HTTPException(400, f"Active fiducial list {wizard.active_list_id} is full (max {MAX_FIDUCIALS_PER_LIST}).")
        fiducial = wizard.add_fiducial(probe_transform)
        return JSONResponse({
            "status": "success",
            "active_list_id": wizard.active_list_id,
            "fiducial": fiducial.to_dict()
        })
    except HTTPException as e:
        backend_logger.error(f"Probe capture error for session {session_id}: {e.detail}")
        raise e
    except Exception as e:
        backend_logger.error(f"Unexpected error during probe capture for session {session_id}: {e}", exc_info=True)
        raise HTTPException(500, f"Internal server error during probe capture: {e}")


@router.post("/sessions/{session_id}/register")
async def register_fiducial_lists(session_id: str, request: RegisterRequest):
    """
    Computes the transform from one fiducial list to another and stores it in
    the output transform. Unknown list or transform ids count as undefined.
    """
    try:
        wizard = require_session(session_id)
        result = wizard.calculate_transform(
            wizard.get_fiducial_list(request.from_list_id),
            wizard.get_fiducial_list(request.to_list_id),
            wizard.get_transform(request.output_transform_id),
            request.transform_type
        )
        body = result.to_dict()
        body["output_transform_id"] = request.output_transform_id if result.succeeded else None
        return JSONResponse(body, status_code=200 if result.succeeded else 422)
    except HTTPException as e:
        backend_logger.error(f"Registration error for session {session_id}: {e.detail}")
        raise e
    except ValueError as e:
        backend_logger.error(f"Registration input error for session {session_id}: {e}")
        raise HTTPException(400, str(e))
    except Exception as e:
        backend_logger.error(f"Unexpected error during registration for session {session_id}: {e}", exc_info=True)
        raise HTTPException(500, f"Internal server error during registration: {e}")


@router.get("/logs/{session_id}")
async def get_logs(session_id: str):
    """Retrieve logs for a specific session"""
    try:
        wizard = session_manager.get(session_id)
        if wizard is not None:
            return JSONResponse({"logs": wizard.log_buffer.get_logs()})
        # Logs written before a server restart are still on disk
        if not (LOGS_DIR / f"session_{session_id}.json").exists():
            return JSONResponse({"logs": []})
        return JSONResponse({"logs": SessionLogBuffer(session_id).get_logs()})
    except Exception as e:
        backend_logger.error(f"Error retrieving logs for session {session_id}: {e}")
        raise HTTPException(500, f"Error retrieving logs: {e}")


@router.post("/cleanup_session/{session_id}")
async def cleanup_single_session(session_id: str):
    """Drop a session together with its fiducial lists, transforms and logs."""
    if not session_manager.cleanup_session(session_id):
        raise HTTPException(404, f"Session {session_id} not found.")
    return JSONResponse({"status": "success", "message": f"Session {session_id} cleaned up."})
