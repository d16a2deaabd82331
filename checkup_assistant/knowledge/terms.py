"""医学术语库，用于快速解释页面上出现的专业词汇。"""

from typing import Dict, Optional


MEDICAL_TERMS: Dict[str, str] = {
    "AMH": "抗缪勒管激素，评估卵巢储备功能的指标，数值越高说明卵子储备越充足",
    "TORCH": "一组病原体的缩写，包括弓形虫、风疹病毒、巨细胞病毒、单纯疱疹病毒等，感染可能影响胎儿发育",
    "TCT": "液基薄层细胞学检查，宫颈癌筛查的一种方法",
    "HPV": "人乳头瘤病毒，某些高危型别与宫颈癌相关",
    "性激素六项": "包括促卵泡激素(FSH)、黄体生成素(LH)、雌二醇(E2)、孕酮(P)、睾酮(T)、泌乳素(PRL)，评估内分泌功能",
    "甲状腺功能": "检查甲状腺激素水平，甲状腺功能异常可能影响受孕和胎儿智力发育",
    "支原体/衣原体": "性传播病原体，感染可能导致不孕或流产",
    "Rh血型": "除ABO外的另一种血型系统，Rh阴性妈妈怀Rh阳性宝宝可能需要特殊处理",
    "空腹血糖": "空腹状态下的血糖水平，用于筛查糖尿病",
    "肝肾功能": "评估肝脏和肾脏的工作状态",
    "凝血功能": "检查血液凝固能力，异常可能增加流产风险",
    "染色体核型": "检查染色体数目和结构是否正常，用于排查遗传病",
    "免疫抗体": "检查体内是否存在影响怀孕的自身抗体",
    "阴超": "经阴道超声检查，比腹部B超更清晰观察子宫和卵巢",
    "乳腺B超": "用超声波检查乳腺组织，筛查乳腺疾病",
    "白带常规": "检查阴道分泌物，判断是否有炎症或感染",
    "梅毒螺旋体": "梅毒病原体的检测，梅毒可通过母婴传播",
    "乙肝": "乙型肝炎病毒检测，乙肝可通过母婴传播",
    "卵巢储备": "卵巢中剩余卵子的数量和质量，随年龄下降",
    "排卵期": "月经周期中最容易受孕的时期，通常在下次月经前14天左右",
    "叶酸": "维生素B9，孕前补充可预防胎儿神经管畸形",
}


def explain_term(term: str) -> Optional[str]:
    """返回术语的预设解释。

    先按原文精确查找；找不到时取第一个被 term 包含的词条（按词库顺序），
    例如 "AMH检测" 会命中 "AMH"。都没有则返回 None。
    """

    if term in MEDICAL_TERMS:
        return MEDICAL_TERMS[term]
    for key, text in MEDICAL_TERMS.items():
        if key in term:
            return text
    return None


def term_question(term: str) -> str:
    """向助手追问某个术语时使用的提问模板。"""

    return f'请用通俗易懂的语言解释"{term}"是什么，为什么备孕要检查这个指标，正常范围是多少。用中文回答。'
