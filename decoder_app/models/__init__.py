"""Application data models."""

from dataclasses import dataclass
from typing import Any, Dict

from decoder_app.services.errors import RegexRequestError


@dataclass
class RegexRequest:
    text: str
    pattern: str

    def validate(self):
        errors = []
        if not isinstance(self.text, str):
            errors.append("text 必须是字符串")
        if not isinstance(self.pattern, str):
            errors.append("pattern 必须是字符串")
        elif not self.pattern:
            errors.append("pattern 不能为空")
        if errors:
            raise RegexRequestError("参数验证失败: " + "; ".join(errors))

    @classmethod
    def from_dict(cls, data: Any) -> 'RegexRequest':
        if not isinstance(data, dict):
            raise RegexRequestError("请求体必须是 JSON 对象: {text, pattern}")
        for field in ('text', 'pattern'):
            if field not in data:
                raise RegexRequestError(f"缺少必需字段: {field}")
        req = cls(text=data['text'], pattern=data['pattern'])
        req.validate()
        return req

    def to_dict(self) -> Dict[str, Any]:
        return {'text': self.text, 'pattern': self.pattern}


__all__ = ['RegexRequest']
