"""领域层模型与协议。

包含：
- models: Turn / ProviderConfig 模型。
- conversation: 单个 Provider 私有的 ConversationState。
- exceptions: 业务异常类型定义。
"""
