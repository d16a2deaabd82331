"""领域层模型与异常。

包含：
- models: ChatMessage / ResolveContext / Resolution / 网关请求响应 / 只读配置模型。
- exceptions: 业务异常类型定义。
"""
