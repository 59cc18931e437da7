from ..models.setting import Setting
from ..models.stage_setting import StageSetting

ACTIVE_STAGE_KEY = 'active_stage'


def active_stage():
    try:
        return int(Setting.get_value(ACTIVE_STAGE_KEY, 1))
    except (TypeError, ValueError):
        return 1


def set_active_stage(stage):
    Setting.set_value(ACTIVE_STAGE_KEY, str(int(stage)))


def stage_is_open(stage):
    row = StageSetting.for_stage(stage)
    return row is None or row.is_open
