from enum import IntEnum


class SendStep(IntEnum):
    VALIDATE = 1
    RESOLVE_BRIDGE = 2
    RESOLVE_TOKEN = 3
    RESOLVE_DECIMALS = 4
    APPROVE = 5
    BUILD_OPTIONS = 6
    QUOTE = 7
    CHECK_BALANCE = 8
    SUBMIT = 9
    CONFIRM = 10

    @property
    def has_side_effects(self) -> bool:
        """ Steps that submit transactions and must not be blindly re-run """
        return self in (SendStep.APPROVE, SendStep.SUBMIT)


# State interface defining the behavior of different states
class State:
    step: SendStep

    def handle(self, flow) -> None:
        pass
