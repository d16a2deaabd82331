"""体检套餐配置，供年龄段推荐与术语解释使用。"""

from typing import Dict, List

from checkup_assistant.domain.models import CheckupPackage, PackageFeature, AgeBracketProfile
from checkup_assistant.knowledge.age_groups import get_age_group


CHECKUP_PACKAGES: List[CheckupPackage] = [
    CheckupPackage(
        id="basic",
        name="基础版",
        price="¥1,500-2,500",
        price_range=(1500, 2500),
        description="覆盖所有必做项目，适合身体健康、无特殊病史的年轻女性",
        recommended_for=("25-28岁", "身体健康", "首次备孕"),
        features=(
            PackageFeature("血常规、尿常规、血型"),
            PackageFeature("肝肾功能检查"),
            PackageFeature("妇科检查 + B超"),
            PackageFeature("TORCH五项筛查", term="TORCH"),
            PackageFeature("甲状腺功能", term="甲状腺功能"),
            PackageFeature("TCT宫颈筛查", term="TCT"),
        ),
    ),
    CheckupPackage(
        id="comprehensive",
        name="全面版",
        price="¥3,500-5,000",
        price_range=(3500, 5000),
        description="必做项目 + AMH + 性激素，适合29-35岁备孕女性",
        recommended_for=("29-35岁", "推荐选择", "全面评估"),
        features=(
            PackageFeature("包含基础版所有项目"),
            PackageFeature("AMH卵巢储备检测", term="AMH"),
            PackageFeature("性激素六项", term="性激素六项"),
            PackageFeature("HPV病毒检测", term="HPV"),
            PackageFeature("乳腺B超检查"),
            PackageFeature("口腔健康检查"),
            PackageFeature("甲状腺B超"),
        ),
    ),
    CheckupPackage(
        id="premium",
        name="高端版",
        price="¥6,000-8,000",
        price_range=(6000, 8000),
        description="全面检查 + 遗传学筛查 + VIP服务，适合高龄或有特殊情况者",
        recommended_for=("36岁以上", "高龄备孕", "特殊情况"),
        features=(
            PackageFeature("包含全面版所有项目"),
            PackageFeature("染色体核型分析", term="染色体核型"),
            PackageFeature("遗传病基因筛查", term="遗传病"),
            PackageFeature("凝血功能检查", term="凝血功能"),
            PackageFeature("免疫抗体检查", term="免疫抗体"),
            PackageFeature("VIP绿色通道"),
            PackageFeature("专家一对一咨询"),
        ),
    ),
]

_BY_ID: Dict[str, CheckupPackage] = {p.id: p for p in CHECKUP_PACKAGES}


def get_package(package_id: str) -> CheckupPackage:
    """根据 id 获取套餐，id 不存在时抛出 KeyError。"""

    try:
        return _BY_ID[package_id]
    except KeyError:
        raise KeyError(f"Unknown package: {package_id!r}") from None


def recommend_package(age: int) -> CheckupPackage:
    profile: AgeBracketProfile = get_age_group(age)
    return get_package(profile.recommended_package)
