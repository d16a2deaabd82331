"""年龄段配置。

四个年龄段在 [25, 40] 上首尾相接、互不重叠；超出范围的年龄
回退到默认年龄段（29-32岁），这是约定的兜底策略而不是错误。
"""

from typing import List, Tuple

from checkup_assistant.domain.models import AgeBracketProfile


AGE_DOMAIN: Tuple[int, int] = (25, 40)

AGE_GROUPS: List[AgeBracketProfile] = [
    AgeBracketProfile(
        min_age=25,
        max_age=28,
        name="25-28岁",
        title="黄金生育期",
        description="生育力旺盛，卵巢功能良好",
        focus_points=("基础检查即可", "关注营养状况", "建立健康生活方式"),
        recommended_package="basic",
        amh_range="2.0-6.8 ng/ml",
    ),
    AgeBracketProfile(
        min_age=29,
        max_age=32,
        name="29-32岁",
        title="最佳生育期",
        description="生育力良好，建议全面检查",
        focus_points=("建议AMH检测", "关注甲状腺功能", "口腔检查"),
        recommended_package="comprehensive",
        amh_range="1.5-4.0 ng/ml",
    ),
    AgeBracketProfile(
        min_age=33,
        max_age=35,
        name="33-35岁",
        title="成熟生育期",
        description="生育力开始下降，需重点关注",
        focus_points=("必做AMH检测", "性激素六项", "卵巢储备评估"),
        recommended_package="comprehensive",
        amh_range="1.0-3.0 ng/ml",
    ),
    AgeBracketProfile(
        min_age=36,
        max_age=40,
        name="36-40岁",
        title="高龄备孕",
        description="生育力明显下降，建议高端检查",
        focus_points=("全面卵巢功能评估", "染色体检查", "遗传咨询"),
        recommended_package="premium",
        amh_range="0.5-2.0 ng/ml",
    ),
]

DEFAULT_AGE_GROUP = AGE_GROUPS[1]


def get_age_group(age: int) -> AgeBracketProfile:
    """获取年龄对应的年龄段，超出 [25, 40] 时返回默认年龄段。"""

    for group in AGE_GROUPS:
        if group.contains(age):
            return group
    return DEFAULT_AGE_GROUP
