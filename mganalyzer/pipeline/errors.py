"""Error kinds raised while validating and running a pipeline.

Every error is fatal to a run. The kind is the class name and is reported
to the user together with the failing stage, when there is one.
"""


class PipelineError(Exception):
    def __init__(self, reason, stage=None):
        super(PipelineError, self).__init__(reason)
        self.reason = reason
        self.stage = stage

    @property
    def kind(self):
        return self.__class__.__name__

    def describe(self):
        """Single line description: `<stage>: <kind>: <reason>`.
        """
        parts = [self.stage] if self.stage else []
        parts += [self.kind, " ".join(str(self.reason).split())]
        return ": ".join(parts)


class ConfigInvalid(PipelineError):
    """Missing or malformed required parameter."""


class PreconditionUnmet(PipelineError):
    """Input reads or a dependency artifact are missing or ambiguous."""


class ToolNotInstalled(PipelineError):
    """External executable could not be resolved."""


class StageExecutionFailed(PipelineError):
    """Tool exited non-zero or did not write an expected output."""
    def __init__(self, reason, stage=None, output=""):
        super(StageExecutionFailed, self).__init__(reason, stage)
        self.output = output


class WorkspaceConflict(PipelineError):
    """Stage directory holds a previous run's results and overwrite was not requested."""
