# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/devsetup/runner/errors.py
class ProvisioningError(RuntimeError):
    """Base class for provisioning failures."""


class PreconditionCheckError(ProvisioningError):
    """The precondition itself could not be evaluated; the step runs anyway."""


class ActionFailure(ProvisioningError):
    """A step's external action reported failure."""


class EnvironmentMismatch(ProvisioningError):
    """
    A discovered value contradicts what the setup expects.

    Never recovered automatically; the message tells the user how to fix it.
    """

    def __init__(self, what: str, *, expected: str, found: str, remedy: str):
        self.what = what
        self.expected = expected
        self.found = found
        self.remedy = remedy
        super().__init__(
            f"{what} mismatched. Found {found}; expected {expected}. "
            f"Please fix it by running '{remedy}' and try again."
        )


class UserDeclined(Exception):
    """Raised by a step to record that the user said no. Not a failure."""


class StepPlanError(ValueError):
    pass


class DuplicateStepError(StepPlanError):
    pass


class UnknownStepError(StepPlanError):
    pass


class OutOfOrderStepError(StepPlanError):
    pass
