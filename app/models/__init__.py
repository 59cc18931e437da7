from .user import User
from .admin import Admin
from .setting import Setting
from .form_field import FormField
from .submission import Submission
from .invitee import Invitee
from .invitation_setting import InvitationSetting
from .stage_setting import StageSetting
from .notification import Notification
# base mixins are imported by the above as needed
