import logging

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool

from coderunner.dependencies import AppSettings, Store
from coderunner.errors import CodeRunnerError
from coderunner.models.submissions import SubmissionResponse
from coderunner.pipeline import (
    build_submission,
    describe_failure,
    parse_submission_form,
    receive_submission,
    run_submission,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["submissions"])

UPLOAD_SUCCESS = '"Upload Status":"Successfully Uploaded File(s)"'
BUILD_SUCCESS = "Compiled successfully"


@router.post("/upload")
async def upload(request: Request, store: Store, settings: AppSettings) -> str:
    form = await request.form()
    try:
        submission = parse_submission_form(form)
        await run_in_threadpool(
            receive_submission,
            store,
            submission,
            settings.workspace.assignments_dir,
            settings.workspace.sniff_bytes,
        )
    except CodeRunnerError as e:
        logger.warning("upload failed: %s (context=%s)", e.detail, e.context)
        return e.status_line()
    finally:
        await form.close()
    return UPLOAD_SUCCESS


@router.api_route("/build", methods=["GET", "POST"])
def build(store: Store, settings: AppSettings) -> str:
    try:
        result = build_submission(store, settings.workspace.assignments_dir, settings.runner.shell)
    except CodeRunnerError as e:
        return e.status_line()
    if not result.success:
        return describe_failure(result)
    return BUILD_SUCCESS


@router.api_route("/run", methods=["GET", "POST"])
def run(store: Store, settings: AppSettings) -> str:
    try:
        result = run_submission(store, settings.workspace.assignments_dir, settings.runner.shell)
    except CodeRunnerError as e:
        return e.status_line()
    if not result.success:
        return describe_failure(result)
    return result.output


@router.get("/submission", response_model=SubmissionResponse)
def get_submission(store: Store) -> SubmissionResponse:
    return SubmissionResponse.from_session(store.current())
