"""Pydantic response models for the submission API."""

from pydantic import BaseModel

from coderunner.session import SubmissionSession


class Argument(BaseModel):
    """One positional argument appended to the run command."""

    key: str
    value: str


class SubmissionResponse(BaseModel):
    """Response model for the /submission endpoint."""

    compile_command: str
    run_command: str
    work_dir: str
    root_dir: str
    arguments: list[Argument]

    @classmethod
    def from_session(cls, session: SubmissionSession) -> "SubmissionResponse":
        return cls(
            compile_command=session.compile_command,
            run_command=session.run_command,
            work_dir=session.work_dir,
            root_dir=session.root_dir,
            arguments=[Argument(key=k, value=v) for k, v in session.arguments.items()],
        )


class HealthResponse(BaseModel):
    status: str
    assignments_dir: str
