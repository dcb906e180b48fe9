from .character import CSSCharacter, InGameCharacter
from .stage import Stage
from .state import ActionState, Hurtbox, LCancel
