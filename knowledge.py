"""Static dream knowledge: the symbol lexicon and the interpretive school profiles.

Both tables are built once at import time and never mutated afterwards, so
they can be read from any request without locking.
"""
import json
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

# Insertion order matters: it is the order symbols are matched and reported in.
DREAM_SYMBOLS = MappingProxyType({
    "蛇": "象征潜意识、转变、智慧或潜在的危险。在弗洛伊德理论中可能代表欲望，在荣格理论中可能代表潜意识的自性。",
    "水": "代表情感、生命流动、潜意识或无意识状态。平静的水象征情感的平和，波涛汹涌的水象征情感的波动。",
    "飞翔": "象征自由、抱负或脱离控制。也可能代表逃避现实或追求更高的精神境界。",
    "坠落": "象征失控、焦虑、缺乏安全感或对某事物的恐惧。",
    "死亡": "通常不代表实际的死亡，而是象征转变、结束或新的开始。",
    "房屋": "代表个人的心理状态或自我的不同层面。不同房间代表不同的心理空间。",
    "门": "象征机会、转变或进入潜意识的大门。",
    "车": "代表人生方向或自我控制能力。驾驶象征对生活的掌控。",
    "镜子": "象征自我认知、自省或自我形象。",
    "火": "象征激情、毁灭、净化或潜意识的力量。",
    "动物": "各具象征意义：狗=忠诚，虎=力量，猫=神秘等。",
    "亲人": "梦中亲人的出现可能代表你自身的某些特质或未解决的情感。",
    "孩子": "象征纯真、新的开始或你内心的孩童。",
    "牙齿": "通常与自信、外表或沟通能力相关。",
    "考试": "象征生活中的测试、压力或对能力的评估。",
    "迷宫": "象征迷茫、复杂的情感或寻找人生方向。",
    "图书馆": "象征知识、潜意识的记忆或寻求答案。",
    "海洋": "代表更深的潜意识，情感的浩瀚与未知。",
    "月亮": "象征女性原型、情感、直觉或周期性变化。",
    "太阳": "象征意识、阳性原则、能量或希望。",
    "森林": "象征潜意识、未知或自然的本能。",
    "高山": "象征挑战、目标、精神成长或障碍。",
    "桥": "象征连接、过渡或转变。",
    "塔": "象征孤立、雄心或精神追求。",
})


def serialize_lexicon(lexicon=DREAM_SYMBOLS) -> str:
    """Render the lexicon as indented JSON, keeping lexicon order and CJK text as-is."""
    return json.dumps(dict(lexicon), ensure_ascii=False, indent=2)


# ----------------------------
# Interpretive schools
# ----------------------------
class SchoolProfile(BaseModel):
    """One interpretive school and the analytical stance it asks the model to take."""

    model_config = ConfigDict(frozen=True)

    id: str
    summary: str
    persona: str
    emphasis: tuple[tuple[str, str], ...]
    closing: str

    @property
    def prompt_template(self) -> str:
        # Every school shares the lexicon block and the
        # overview -> symbols -> insight output order.
        points = "\n".join(
            f"{i}. {title}：{detail}"
            for i, (title, detail) in enumerate(self.emphasis, start=1)
        )
        return (
            f"{self.persona}，强调：\n"
            f"{points}\n\n"
            "在分析时，请参考以下梦境符号库：\n"
            "{lexicon}\n\n"
            f"{self.closing}"
        )


FREUDIAN = SchoolProfile(
    id="弗洛伊德式",
    summary="欲望·压抑·潜意识",
    persona="你是一名专业的弗洛伊德学派梦境分析师。你擅长从精神分析的角度解读梦境",
    emphasis=(
        ("欲望与潜意识", "梦境是潜意识欲望的象征性满足"),
        ("童年经历", "分析早期经历对梦境的影响"),
        ("压抑与象征", "识别被压抑情感的符号表达"),
        ("性象征", "识别可能的性象征和欲望"),
    ),
    closing="请用专业但易懂的语言，先整体分析梦境的潜意识含义，然后逐个解析关键符号，最后给出心理学启示。",
)

JUNGIAN = SchoolProfile(
    id="荣格式",
    summary="原型·集体潜意识",
    persona="你是一名专业的荣格学派梦境分析师。你擅长从分析心理学的角度解读梦境",
    emphasis=(
        ("集体潜意识", "识别原型和集体无意识元素"),
        ("个体化过程", "分析自我整合与人格发展"),
        ("象征与原型", "解读神话、宗教和原型象征"),
        ("阴影与自性", "分析人格的阴影面和自性追求"),
    ),
    closing="请用富有深度但易懂的语言，先整体解读梦境的原型意义，然后分析关键象征和原型元素，最后给出个人成长的启示。",
)

SCHOOL_PROFILES = MappingProxyType({
    FREUDIAN.id: FREUDIAN,
    JUNGIAN.id: JUNGIAN,
})

# Unknown school ids are served with this profile instead of being rejected.
DEFAULT_SCHOOL = JUNGIAN.id
