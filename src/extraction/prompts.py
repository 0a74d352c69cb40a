"""
System prompts for task extraction.

The date and amount rules live in the prompt text, not in code: the model's
reading of these instructions is the behavior, and the response validator is
the deterministic safety net after it. Treat the templates as versioned
configuration and change them deliberately.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from string import Template
from typing import Optional

PROMPT_VERSION = "2025.12"


@dataclass(frozen=True)
class DateContext:
    today: date

    @classmethod
    def for_today(cls, today: Optional[date] = None) -> "DateContext":
        return cls(today or date.today())

    @property
    def today_str(self) -> str:
        return self.today.isoformat()

    @property
    def tomorrow_str(self) -> str:
        return (self.today + timedelta(days=1)).isoformat()

    def net(self, days: int) -> str:
        """Due date for NET-N terms, counted from today."""
        return (self.today + timedelta(days=days)).isoformat()

    def as_mapping(self) -> dict:
        return {
            "today": self.today_str,
            "tomorrow": self.tomorrow_str,
            "current_year": str(self.today.year),
            "net30": self.net(30),
            "net60": self.net(60),
        }


def is_simple_input(text: str) -> bool:
    """Plain reminders carry no currency, invoice or NET-terms markers."""
    lowered = text.lower()
    return "$" not in text and "invoice" not in lowered and "net " not in lowered


SIMPLE_REMINDER_TEMPLATE = Template("""Extract task and output JSON. Today is ${today}.

Date Rules:
- "tomorrow" → "${tomorrow}"
- "today" → "${today}"
- "next week" → add 7 days from today
- No date specified → use today

Time Rules:
- "noon" → "12:00"
- "midnight" → "00:00"
- "3pm" or "3 pm" → "15:00"
- "9:30am" or "9:30 am" → "09:30"
- "5" or "5pm" → "17:00"
- No time specified → omit dueTime field

Output format:
[{"title":"task description","dueDate":"YYYY-MM-DD","dueTime":"HH:MM"}]

Examples:
"reserve table at Tom & Jerry noon tomorrow" → [{"title":"Reserve table at Tom & Jerry","dueDate":"${tomorrow}","dueTime":"12:00"}]
"call dentist" → [{"title":"Call dentist","dueDate":"${today}"}]
"meeting at 3pm today" → [{"title":"Meeting","dueDate":"${today}","dueTime":"15:00"}]

Output ONLY the JSON array.""")


INVOICE_TEXT_TEMPLATE = Template("""Extract tasks and output a JSON array. Today is ${today}.

For invoices with multiple payment terms, create SEPARATE tasks for each payment.

Date Parsing Rules (PRIORITY ORDER - USE THE FIRST MATCHING RULE):
1. EXPLICIT DATES (highest priority - always use these if present):
   - "9-Jan-26" or "9/Jan/26" or "Jan-9-26" → "2026-01-09"
   - "23-Jan-26" → "2026-01-23"
   - "12.26.25" or "12/26/25" → "2025-12-26"
   - "Jan 15" or "January 15" → "${current_year}-01-15"

2. RELATIVE DATES:
   - "TODAY" or "DUE TODAY" → "${today}"
   - "tomorrow" → "${tomorrow}"

3. NET TERMS (lowest priority - only use if NO explicit date):
   - "NET 30" alone → ${net30}
   - "NET 60" alone → ${net60}

IMPORTANT: If you see BOTH an explicit date AND "NET 30", use the explicit date!

Amount Parsing:
- "$46,518.71" → 46518.71 (remove $, commas)
- "$-15,187.59" → -15187.59 (preserve negative sign)
- "$-750" → -750 (preserve negative)

Sign Convention:
- Money you RECEIVE (income, receivable: "received", "from client", "payment to you") → POSITIVE
- Money you PAY (expense, payable: "bill", "due to", "pay", "owe") → NEGATIVE

Title and Notes Rules:
- ONLY include invoice/reference numbers if explicitly mentioned in the input
- DO NOT hallucinate or make up invoice numbers
- Keep title descriptive but concise
- Only add info that's actually in the input text

Example 1 (WITH invoice number in input):
Input: "payment terms 50% DOWN $60,470.15 DUE TODAY 50% NET 30 $60,470.15 DUE 12.26.25 Invoice #185"
Output:
[
  {"title":"50% Down Payment - Invoice #185","dueDate":"${today}","amount":60470.15,"notes":"Invoice #185"},
  {"title":"50% NET 30 Payment - Invoice #185","dueDate":"2025-12-26","amount":60470.15,"notes":"Invoice #185"}
]

Example 2 (NO invoice number in input):
Input: "$46,518.71 Insurance Package 9-Jan-26"
Output:
[
  {"title":"Insurance Package","dueDate":"2026-01-09","amount":46518.71,"notes":""}
]

Example 3 (Negative amount):
Input: "Insurance Package $-15,187.59 23-Jan-26"
Output:
[
  {"title":"Insurance Package","dueDate":"2026-01-23","amount":-15187.59,"notes":""}
]

Rules:
- Each payment = separate task (one task per payment, not per line item)
- Use explicit dates over NET calculations
- Use YYYY-MM-DD format for ALL dates
- ONLY include invoice/reference numbers if they appear in the input
- DO NOT make up or hallucinate invoice numbers
- Keep notes empty if no additional info provided

Output ONLY the JSON array.""")


DOCUMENT_TEMPLATE = Template("""Extract INVOICE PAYMENT information from the document and output a JSON array. Today is ${today}.

CRITICAL INSTRUCTIONS:
- You are creating PAYMENT REMINDERS for invoices/bills
- Create ONE task per PAYMENT (not per line item)
- If payment terms split the payment (e.g., "50% down, 50% NET 30"), create SEPARATE tasks for each payment
- DO NOT create multiple tasks for the same payment
- DO NOT create tasks for processing, tracking, or verification
- DO NOT invent invoice or reference numbers that are not in the document

Title Format:
- Single payment: "Invoice #[NUMBER] - [Customer Name]"
- Multiple payments: "Invoice #[NUMBER] - [Payment Description] - [Customer Name]"
- Example: "Invoice #236 - Eaton Processing"
- Example: "Invoice #185 - 50% Down - Customer Name"

Date Parsing Rules (PRIORITY ORDER):
1. EXPLICIT DATES (highest priority):
   - "9-Jan-26" or "9/Jan/26" → "2026-01-09"
   - "12.26.25" or "12/26/25" → "2025-12-26"
   - "Jan 15" or "January 15" → "${current_year}-01-15"

2. RELATIVE DATES:
   - "TODAY" or "DUE TODAY" → "${today}"
   - "tomorrow" → "${tomorrow}"

3. NET TERMS (only if NO explicit date):
   - "NET 30" → ${net30}
   - "NET 60" → ${net60}

Amount Parsing with Sign Convention:
- ACCOUNTS RECEIVABLE (you are RECEIVING money) = POSITIVE amount
  * Look for: "Origin:", "From:", "Sold to:", invoice TO someone else
  * You are the seller/sender
  * Example: Invoice from you to Eaton Processing → +46028.64

- ACCOUNTS PAYABLE (you are PAYING money) = NEGATIVE amount
  * Look for: "Bill from", "Due to:", "Payment to:", invoice FROM someone else
  * You are the buyer/recipient
  * Example: Bill from vendor to you → -46028.64

Amount format:
- Remove $ and commas: "$46,518.71" → 46518.71
- Apply sign based on payment direction
- If unclear, default to NEGATIVE (payable)

Notes Field:
- Include customer/destination name
- Include invoice number if present
- Include payment terms if relevant
- Indicate if receivable or payable
- Keep concise

Examples:

ACCOUNTS RECEIVABLE (receiving money):
Input: "Invoice #236, Origin: Your Company, Destination: Eaton Processing LLC, Due: 2026-01-08, Total: $46,028.64"
Output:
[
  {
    "title": "Invoice #236 - Eaton Processing",
    "dueDate": "2026-01-08",
    "amount": 46028.64,
    "notes": "Receivable - Eaton Processing LLC"
  }
]

ACCOUNTS PAYABLE (paying money):
Input: "Invoice #789 from ABC Supplies, Due: 2026-01-15, Amount Due: $5,200.00"
Output:
[
  {
    "title": "Invoice #789 - ABC Supplies",
    "dueDate": "2026-01-15",
    "amount": -5200.00,
    "notes": "Payable - ABC Supplies"
  }
]

Split payment receivable:
Input: "Invoice #185, 50% DOWN $60,470 DUE TODAY, 50% NET 30 $60,470 DUE 12.26.25, To: Customer XYZ"
Output:
[
  {
    "title": "Invoice #185 - 50% Down Payment - Customer XYZ",
    "dueDate": "${today}",
    "amount": 60470.00,
    "notes": "Receivable - 50% down payment"
  },
  {
    "title": "Invoice #185 - 50% NET 30 - Customer XYZ",
    "dueDate": "2025-12-26",
    "amount": 60470.00,
    "notes": "Receivable - 50% NET 30 payment"
  }
]

Output ONLY the JSON array, no other text.""")


DOCUMENT_USER_PROMPT = (
    "Extract the invoice payment information. Create ONE payment reminder with invoice number, "
    "customer name, due date, and total amount. If there are split payment terms, create one "
    "task per payment."
)

DOCUMENT_TEXT_USER_PROMPT = (
    "Extract the invoice payment information from this text. Create ONE payment reminder with "
    "invoice number, customer name, due date, and total amount:"
)


def build_reminder_prompt(text: str, ctx: Optional[DateContext] = None) -> str:
    """System prompt for a plain-text request; the template depends on the input."""
    ctx = ctx or DateContext.for_today()
    template = SIMPLE_REMINDER_TEMPLATE if is_simple_input(text) else INVOICE_TEXT_TEMPLATE
    return template.safe_substitute(ctx.as_mapping())


def build_document_prompt(ctx: Optional[DateContext] = None) -> str:
    ctx = ctx or DateContext.for_today()
    return DOCUMENT_TEMPLATE.safe_substitute(ctx.as_mapping())


def build_text_user_prompt(text: str) -> str:
    return f'Extract tasks: "{text}"'


def build_document_text_user_prompt(document_text: str) -> str:
    return f"{DOCUMENT_TEXT_USER_PROMPT}\n\n{document_text}"
