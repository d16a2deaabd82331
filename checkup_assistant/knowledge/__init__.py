"""只读知识库。

- terms: 医学术语解释。
- age_groups: 年龄段配置与查询。
- responses: 演示模式预设回复、关键词规则、兜底文案与系统提示词。
- packages: 体检套餐与按年龄推荐。

这些数据在进程内共享且不可变，读取时无需加锁。
"""

from checkup_assistant.knowledge.age_groups import AGE_GROUPS, get_age_group
from checkup_assistant.knowledge.packages import CHECKUP_PACKAGES, get_package, recommend_package
from checkup_assistant.knowledge.responses import DEMO_RESPONSES, QUICK_QUESTIONS, SYSTEM_PROMPT, get_demo_response
from checkup_assistant.knowledge.terms import MEDICAL_TERMS, explain_term, term_question

__all__ = [
    "AGE_GROUPS",
    "CHECKUP_PACKAGES",
    "DEMO_RESPONSES",
    "MEDICAL_TERMS",
    "QUICK_QUESTIONS",
    "SYSTEM_PROMPT",
    "explain_term",
    "get_age_group",
    "get_demo_response",
    "get_package",
    "recommend_package",
    "term_question",
]
