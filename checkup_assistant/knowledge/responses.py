"""演示模式的预设回复与关键词规则。

匹配规则是“首个命中即返回”，不做打分排序：同时提到多个话题的问题
总是落到声明顺序最靠前的那条规则上。规则顺序即优先级，调整顺序会改变行为。
"""

from typing import Dict, List, Tuple


DEFAULT_GREETING = (
    "您好！我是您的备孕健康顾问。我可以帮您：\n\n"
    "1. **解释医学术语** - 如AMH、TORCH、性激素六项等\n"
    "2. **推荐体检项目** - 根据您的年龄和情况\n"
    "3. **解答备孕疑问** - 检查时间、准备事项等\n"
    "4. **分析检查报告** - 帮助理解各项指标\n\n"
    "请问有什么可以帮助您的吗？"
)

AMH_EXPLANATION = (
    "**AMH（抗缪勒管激素）**是评估卵巢储备功能的重要指标。\n\n"
    "📊 **正常参考范围：**\n"
    "- 25-28岁：2.0-6.8 ng/ml\n"
    "- 29-32岁：1.5-4.0 ng/ml\n"
    "- 33-35岁：1.0-3.0 ng/ml\n"
    "- 36-40岁：0.5-2.0 ng/ml\n\n"
    "💡 **解读：**\n"
    "- >2.0：卵巢储备良好\n"
    "- 1.0-2.0：卵巢储备下降\n"
    "- <1.0：卵巢储备较低，建议尽快备孕\n\n"
    "⚠️ AMH低不代表不能怀孕，只是提醒要抓紧时间哦！"
)

TORCH_EXPLANATION = (
    "**TORCH检查**是一组可能影响胎儿的病原体筛查：\n\n"
    "🔬 **包含项目：**\n"
    "- **T**oxoplasma（弓形虫）- 猫狗宠物可能携带\n"
    "- **O**ther（其他）\n"
    "- **R**ubella（风疹病毒）\n"
    "- **C**ytomegalovirus（巨细胞病毒）\n"
    "- **H**erpes simplex（单纯疱疹病毒）\n\n"
    "⚠️ **为什么重要？**\n"
    "- 孕期感染可能导致流产、胎儿畸形\n"
    "- 建议孕前检查，如有感染先治疗再怀孕\n"
    "- 养宠物的准妈妈要特别注意弓形虫"
)

HORMONE_EXPLANATION = (
    "**性激素六项**评估女性内分泌功能：\n\n"
    "📋 **检查项目：**\n"
    "1. **FSH**（促卵泡激素）- 刺激卵泡发育\n"
    "2. **LH**（黄体生成素）- 促进排卵\n"
    "3. **E2**（雌二醇）- 主要雌激素\n"
    "4. **P**（孕酮）- 维持妊娠\n"
    "5. **T**（睾酮）- 雄激素水平\n"
    "6. **PRL**（泌乳素）- 过高会抑制排卵\n\n"
    "⏰ **检查时间：**月经第2-4天抽血\n\n"
    "💡 通过这六项可以了解卵巢功能、排卵情况和内分泌状态。"
)

TIMING_ADVICE = (
    "**最佳检查时间建议：**\n\n"
    "📅 **提前多久检查？**\n"
    "建议提前**3-6个月**，留出调理时间\n\n"
    "🗓️ **月经周期中什么时候去？**\n"
    "- **月经干净后3-7天**最佳\n"
    "- 避开月经期和排卵期\n"
    "- 性激素六项在月经第2-4天\n\n"
    "⏰ **一天中什么时候？**\n"
    "- 早上8-10点空腹前往\n"
    "- 前一天晚上10点后禁食\n\n"
    "🚫 **检查前避免：**\n"
    "- 性生活（前3天）\n"
    "- 剧烈运动\n"
    "- 阴道用药"
)

PREPARATION_CHECKLIST = (
    "**检查前准备清单：**\n\n"
    "📋 **必带物品：**\n"
    "- ✅ 身份证、医保卡\n"
    "- ✅ 既往病历和检查报告\n"
    "- ✅ 空腹前往（可带食物检查后吃）\n"
    "- ✅ 宽松舒适的衣物\n\n"
    "🍽️ **饮食注意：**\n"
    "- 前3天清淡饮食\n"
    "- 前一天晚上10点后禁食\n"
    "- 避免油腻、高蛋白、饮酒\n\n"
    "💊 **药物注意：**\n"
    "- 避免阴道用药\n"
    "- 慢性病患者药物可正常服用\n"
    "- 提前告知医生正在服用的药物\n\n"
    "👕 **着装建议：**\n"
    "- 宽松上衣（方便抽血）\n"
    "- 方便穿脱的裤子\n"
    "- 避免连体衣、连衣裙"
)

FREE_CHECKUP_POLICY = (
    "**上海免费孕前检查政策：**\n\n"
    "✅ **申请条件（满足其一）：**\n"
    "- 夫妻一方为上海户籍\n"
    "- 双方外地户籍但居住证满6个月\n\n"
    "📋 **申请流程：**\n"
    "1. 到居住地居委会/街道计生办\n"
    "2. 填写《家庭档案》申请表\n"
    "3. 提交身份证、结婚证、户口本\n"
    "4. 领取《免费孕前检查通知单》\n"
    "5. 到指定医院预约检查\n\n"
    "💰 **免费项目：**\n"
    "血常规、尿常规、肝功能、肾功能、甲状腺功能、TORCH筛查、妇科B超、白带常规、男方精液分析等\n\n"
    "💡 **省钱攻略：**先申请免费检查，再自费加做AMH、性激素六项等项目，总花费可控制在2000元以内！"
)

FOLIC_ACID_GUIDE = (
    "**叶酸补充指南：**\n\n"
    "💊 **为什么要补？**\n"
    "- 预防胎儿神经管畸形\n"
    "- 降低流产风险\n"
    "- 促进胎儿正常发育\n\n"
    "📏 **剂量建议：**\n"
    "- 孕前3个月开始：0.4-0.8mg/天\n"
    "- 怀孕后前3个月继续\n"
    "- 有神经管缺陷史：需4mg/天（遵医嘱）\n\n"
    "🥬 **食物来源：**\n"
    "- 绿叶蔬菜（菠菜、油菜）\n"
    "- 豆类、坚果\n"
    "- 动物肝脏\n\n"
    "⏰ **服用时间：**\n"
    "- 建议早餐后服用\n"
    "- 每天固定时间\n"
    "- 与维生素C同服吸收更好\n\n"
    "💡 单纯食补不够，建议服用叶酸片！"
)

DEMO_RESPONSES: Dict[str, str] = {
    "default": DEFAULT_GREETING,
    "amh": AMH_EXPLANATION,
    "torch": TORCH_EXPLANATION,
    "性激素": HORMONE_EXPLANATION,
    "时间": TIMING_ADVICE,
    "准备": PREPARATION_CHECKLIST,
    "免费": FREE_CHECKUP_POLICY,
    "叶酸": FOLIC_ACID_GUIDE,
}

# (关键词, 回复键)，按优先级排列
KEYWORD_RULES: List[Tuple[Tuple[str, ...], str]] = [
    (("amh",), "amh"),
    (("torch",), "torch"),
    (("性激素", "六项"), "性激素"),
    (("时间", "什么时候"), "时间"),
    (("准备", "注意"), "准备"),
    (("免费", "政策"), "免费"),
    (("叶酸",), "叶酸"),
]

# 快捷问题（助手面板初始展示）
QUICK_QUESTIONS: Tuple[str, ...] = (
    "AMH是什么？",
    "TORCH检查包括什么？",
    "性激素六项是什么？",
    "什么时候去检查最好？",
    "检查前要准备什么？",
    "免费政策怎么申请？",
    "叶酸怎么补？",
)

# 远程助手的角色设定，可经 ConversationService.add_system_message 注入
SYSTEM_PROMPT = """你是一位专业的备孕健康顾问，擅长用通俗易懂的语言解答备孕体检相关问题。

你的职责：
1. 解释医学术语 - 用普通人能听懂的话解释专业词汇
2. 推荐体检项目 - 根据用户年龄、身体状况给出建议
3. 解答备孕疑问 - 关于体检时间、准备事项、注意事项等
4. 分析检查报告 - 帮助理解各项指标的含义

回答原则：
- 使用温暖、鼓励的语气
- 避免过于专业的术语，必要时解释
- 给出具体、可操作的建议
- 不确定时建议咨询专业医生
- 不涉及诊断和治疗方案

当前服务的是上海地区的备孕人群，可以推荐上海的医院和体检套餐。"""

NOT_UNDERSTOOD_REPLY = "抱歉，我没有理解您的问题。"

REMOTE_NOT_CONFIGURED_REPLY = (
    "⚠️ 未配置Supabase，请设置 SUPABASE_URL 和 SUPABASE_ANON_KEY 环境变量，或启用演示模式。"
)


def remote_error_reply(detail: str) -> str:
    """远程调用失败时展示给用户的降级回复。"""

    return f"⚠️ 调用AI服务出错：{detail or '未知错误'}\n\n请检查配置或切换到演示模式。"


def get_demo_response(message: str) -> str:
    """根据关键词获取演示回复，未命中任何规则时返回默认问候。"""

    lower_msg = message.lower()
    for keywords, key in KEYWORD_RULES:
        if any(k in lower_msg for k in keywords):
            return DEMO_RESPONSES[key]
    return DEMO_RESPONSES["default"]
