"""Static email templates and transaction status lookup tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

DEFAULT_TEMPLATE_ID: Final[str] = "default"
DEFAULT_STATUS_COLOR: Final[str] = "#6b7280"


@dataclass(frozen=True)
class EmailTemplate:
    """Subject, HTML and plain-text bodies with ``{{name}}`` placeholders."""

    id: str
    name: str
    subject: str
    html: str
    text: str


_BASE_STYLE = """
body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; margin: 0; padding: 0; background-color: #f8fafc; }
.container { max-width: 600px; margin: 0 auto; background-color: #ffffff; }
.header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); padding: 40px 20px; text-align: center; }
.header h1 { color: #ffffff; margin: 0; font-size: 24px; font-weight: 600; }
.content { padding: 40px 20px; }
.card { background-color: #f8fafc; border-radius: 12px; padding: 24px; margin: 20px 0; border-left: 4px solid #667eea; }
.detail-row { display: flex; justify-content: space-between; margin: 8px 0; }
.detail-label { color: #718096; font-size: 14px; }
.detail-value { color: #1a202c; font-weight: 600; font-size: 14px; }
.cta-button { display: inline-block; background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; text-decoration: none; padding: 16px 32px; border-radius: 8px; font-weight: 600; margin: 24px 0; }
.footer { background-color: #f7fafc; padding: 24px 20px; text-align: center; color: #718096; font-size: 14px; }
.footer a { color: #667eea; text-decoration: none; }
"""

_FOOTER_WITH_SETTINGS = (
    '<p>이 이메일은 ConnecTone에서 자동으로 발송되었습니다.</p>'
    '<p><a href="{{unsubscribeUrl}}">알림 설정 변경</a> | '
    '<a href="{{supportUrl}}">고객지원</a></p>'
)
_FOOTER_SUPPORT_ONLY = (
    '<p>이 이메일은 ConnecTone에서 자동으로 발송되었습니다.</p>'
    '<p><a href="{{supportUrl}}">고객지원</a></p>'
)

_TEXT_FOOTER = """
---
ConnecTone
이 이메일은 자동으로 발송되었습니다.
알림 설정: {{unsubscribeUrl}}
"""


def _layout(page_title: str, body: str, footer: str = _FOOTER_WITH_SETTINGS) -> str:
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n"
        '<meta charset="utf-8">\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"<title>{page_title}</title>\n"
        f"<style>{_BASE_STYLE}</style>\n"
        "</head>\n<body>\n"
        '<div class="container">\n'
        '<div class="header"><h1>🎵 ConnecTone</h1></div>\n'
        f'<div class="content">\n{body}\n</div>\n'
        f'<div class="footer">{footer}</div>\n'
        "</div>\n</body>\n</html>\n"
    )


NEW_MESSAGE_TEMPLATE = EmailTemplate(
    id="new_message",
    name="신규 메시지 알림",
    subject="새로운 메시지가 도착했습니다",
    html=_layout(
        "새로운 메시지",
        """
<h2 style="color: #1a202c; margin-bottom: 24px;">새로운 메시지가 도착했습니다!</h2>
<div class="card">
  <div style="display: flex; align-items: center; margin-bottom: 16px;">
    <div style="width: 48px; height: 48px; border-radius: 50%; background-color: #667eea; color: white; font-weight: 600; text-align: center; line-height: 48px; margin-right: 16px;">{{senderInitial}}</div>
    <div>
      <h3 style="margin: 0; color: #1a202c;">{{senderName}}</h3>
      <p style="margin: 4px 0 0 0; color: #718096;">{{productTitle}}</p>
    </div>
  </div>
  <div style="color: #4a5568; font-size: 16px; line-height: 1.6;">"{{messagePreview}}"</div>
</div>
<p style="color: #4a5568; margin: 24px 0;">빠른 답변으로 좋은 거래를 만들어보세요!</p>
<div style="text-align: center;"><a href="{{chatUrl}}" class="cta-button">메시지 확인하기</a></div>
""",
    ),
    text="""ConnecTone - 새로운 메시지가 도착했습니다!

안녕하세요!

{{senderName}} ({{productTitle}})

메시지 내용: "{{messagePreview}}"

빠른 답변으로 좋은 거래를 만들어보세요!

메시지 확인하기: {{chatUrl}}
"""
    + _TEXT_FOOTER,
)

TRANSACTION_UPDATE_TEMPLATE = EmailTemplate(
    id="transaction_update",
    name="거래 진행 알림",
    subject="거래 상태가 업데이트되었습니다",
    html=_layout(
        "거래 상태 업데이트",
        """
<h2 style="color: #1a202c; margin-bottom: 24px;">거래 상태가 업데이트되었습니다</h2>
<div class="card" style="border-left-color: {{statusColor}};">
  <div style="display: inline-block; padding: 8px 16px; border-radius: 20px; font-weight: 600; font-size: 14px; background-color: {{statusColor}}; color: white;">{{statusLabel}}</div>
  <p style="color: #4a5568; margin: 16px 0;">{{statusDescription}}</p>
</div>
<div style="margin: 20px 0;">
  <h3 style="margin: 0; color: #1a202c;">{{productTitle}}</h3>
  <p style="margin: 4px 0 0 0; color: #718096;">{{productBrand}} {{productModel}}</p>
</div>
<div style="border: 1px solid #e2e8f0; border-radius: 8px; padding: 20px;">
  <div class="detail-row"><span class="detail-label">거래 금액</span><span class="detail-value">{{amount}}원</span></div>
  <div class="detail-row"><span class="detail-label">거래 상대</span><span class="detail-value">{{counterpartName}}</span></div>
  <div class="detail-row"><span class="detail-label">업데이트 시간</span><span class="detail-value">{{updatedAt}}</span></div>
</div>
<div style="text-align: center;"><a href="{{transactionUrl}}" class="cta-button">거래 상세보기</a></div>
""",
    ),
    text="""ConnecTone - 거래 상태가 업데이트되었습니다

안녕하세요!

상품: {{productTitle}} ({{productBrand}} {{productModel}})
거래 금액: {{amount}}원
거래 상대: {{counterpartName}}
상태: {{statusLabel}}

{{statusDescription}}

거래 상세보기: {{transactionUrl}}
"""
    + _TEXT_FOOTER,
)

LOGISTICS_QUOTE_TEMPLATE = EmailTemplate(
    id="logistics_quote",
    name="운송 견적 알림",
    subject="운송 견적이 준비되었습니다",
    html=_layout(
        "운송 견적",
        """
<h2 style="color: #1a202c; margin-bottom: 24px;">운송 견적이 준비되었습니다!</h2>
<div class="card" style="border-left-color: #10b981;">
  <div style="text-align: center; margin: 24px 0;">
    <p style="font-size: 36px; font-weight: 700; color: #10b981; margin: 0;">{{estimatedPrice}}원</p>
    <p style="color: #718096; font-size: 14px; margin-top: 8px;">예상 운송비</p>
  </div>
  <div class="detail-row"><span class="detail-label">출발지</span><span class="detail-value">{{fromAddress}}</span></div>
  <div class="detail-row"><span class="detail-label">도착지</span><span class="detail-value">{{toAddress}}</span></div>
  <div class="detail-row"><span class="detail-label">예상 소요시간</span><span class="detail-value">{{estimatedDays}}일</span></div>
  <div class="detail-row"><span class="detail-label">보험 포함</span><span class="detail-value">{{insuranceIncluded}}</span></div>
  <div class="detail-row"><span class="detail-label">운송업체</span><span class="detail-value">{{carrierName}}</span></div>
  <div class="detail-row"><span class="detail-label">서비스 유형</span><span class="detail-value">{{serviceType}}</span></div>
</div>
<p style="color: #4a5568; margin: 24px 0;">{{productTitle}} 상품의 운송 견적이 준비되었습니다. 견적을 확인하고 운송을 주문해보세요!</p>
<div style="text-align: center;"><a href="{{quoteUrl}}" class="cta-button">견적 확인하기</a></div>
""",
    ),
    text="""ConnecTone - 운송 견적이 준비되었습니다

안녕하세요!

{{productTitle}} 상품의 운송 견적이 준비되었습니다.

예상 운송비: {{estimatedPrice}}원
출발지: {{fromAddress}}
도착지: {{toAddress}}
예상 소요시간: {{estimatedDays}}일
보험 포함: {{insuranceIncluded}}
운송업체: {{carrierName}}
서비스 유형: {{serviceType}}

견적 확인하기: {{quoteUrl}}
"""
    + _TEXT_FOOTER,
)

DEFAULT_TEMPLATE = EmailTemplate(
    id=DEFAULT_TEMPLATE_ID,
    name="기본 템플릿",
    subject="{{title}}",
    html=_layout(
        "ConnecTone 알림",
        """
<h2 style="color: #1a202c; margin-bottom: 24px;">{{title}}</h2>
<p style="color: #4a5568; line-height: 1.6;">{{content}}</p>
""",
        footer=_FOOTER_SUPPORT_ONLY,
    ),
    text="""ConnecTone 알림

{{title}}

{{content}}

---
ConnecTone
고객지원: {{supportUrl}}
""",
)

EMAIL_TEMPLATES: Final[dict[str, EmailTemplate]] = {
    template.id: template
    for template in (
        NEW_MESSAGE_TEMPLATE,
        TRANSACTION_UPDATE_TEMPLATE,
        LOGISTICS_QUOTE_TEMPLATE,
        DEFAULT_TEMPLATE,
    )
}

# Transaction statuses followed by the listing statuses stored on items.
STATUS_COLORS: Final[dict[str, str]] = {
    "pending": "#f59e0b",
    "paid_hold": "#3b82f6",
    "shipped": "#8b5cf6",
    "delivered": "#10b981",
    "released": "#059669",
    "refunded": "#ef4444",
    "cancelled": "#6b7280",
    "active": "#3b82f6",
    "reserved": "#f59e0b",
    "escrow_completed": "#3b82f6",
    "shipping": "#8b5cf6",
    "sold": "#059669",
}

STATUS_LABELS: Final[dict[str, str]] = {
    "pending": "결제 대기",
    "paid_hold": "결제 완료 (보류)",
    "shipped": "배송 중",
    "delivered": "배송 완료",
    "released": "거래 완료",
    "refunded": "환불 완료",
    "cancelled": "거래 취소",
    "active": "판매중",
    "reserved": "거래중",
    "escrow_completed": "결제완료",
    "shipping": "배송중",
    "sold": "거래완료",
}

STATUS_DESCRIPTIONS: Final[dict[str, str]] = {
    "pending": "구매자가 결제를 진행 중입니다.",
    "paid_hold": "결제가 완료되었고 안전하게 보관되고 있습니다.",
    "shipped": "상품이 배송 중입니다. 배송 추적이 가능합니다.",
    "delivered": "상품이 안전하게 배송되었습니다.",
    "released": "거래가 성공적으로 완료되었습니다.",
    "refunded": "거래가 취소되어 환불이 처리되었습니다.",
    "cancelled": "거래가 취소되었습니다.",
    "active": "상품이 다시 판매중입니다.",
    "reserved": "구매자와 거래가 진행 중입니다.",
    "escrow_completed": "안전결제가 완료되어 발송을 기다리고 있습니다.",
    "shipping": "판매자가 상품을 발송했습니다.",
    "sold": "거래가 성공적으로 완료되었습니다.",
}


def get_template(template_id: str) -> EmailTemplate:
    """Return the template for ``template_id`` or the default template."""

    return EMAIL_TEMPLATES.get(template_id, DEFAULT_TEMPLATE)


__all__ = [
    "DEFAULT_STATUS_COLOR",
    "DEFAULT_TEMPLATE",
    "DEFAULT_TEMPLATE_ID",
    "EMAIL_TEMPLATES",
    "EmailTemplate",
    "STATUS_COLORS",
    "STATUS_DESCRIPTIONS",
    "STATUS_LABELS",
    "get_template",
]
