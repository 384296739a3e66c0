from coderunner.session import SubmissionStore

# Global runtime state shared by upload, build and run
submission_store: SubmissionStore = SubmissionStore()
