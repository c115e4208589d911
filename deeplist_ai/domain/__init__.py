"""领域层模型与异常。

包含：
- models: Message / ModelConfig / AIResponse 以及各操作的入参结构。
- exceptions: AIServiceError 错误体系与错误码。
"""
