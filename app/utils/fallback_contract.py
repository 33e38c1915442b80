"""
Deterministic contract template.

Used whenever the AI generation path is unavailable. Performs no I/O: the
same fields and issue date always render the same text.
"""
from datetime import date

from app.domain.constants import CONTRACT_TYPE_LABELS, DEFAULT_CONTRACT_LABEL, ContractType


def render_fallback_contract(
    contract_type: str,
    client_name: str,
    freelancer_name: str,
    project_scope: str,
    budget: str,
    timeline: str,
    issued_on: date
) -> str:
    label = CONTRACT_TYPE_LABELS.get(contract_type, DEFAULT_CONTRACT_LABEL)
    revisions = "two (2)" if contract_type == ContractType.DESIGN.value else "one (1)"

    return f"""{label}

Dated: {issued_on.strftime("%B %d, %Y")}

PARTIES:
This Agreement ("Agreement") is entered into between {client_name} ("Client") and {freelancer_name} ("Service Provider").

SCOPE OF WORK:
{project_scope}

PAYMENT TERMS:
Client agrees to pay Service Provider a total fee of {budget} for the services described above. Payment is due net 30 days from invoice date. A 50% deposit is required upon signature, with the balance due upon project completion.

PROJECT TIMELINE:
The estimated project timeline is {timeline}. Service Provider will provide regular updates on project progress.

DELIVERABLES:
Service Provider will deliver all work according to the timeline and specifications outlined in this Agreement.

CONFIDENTIALITY:
Both parties agree to maintain the confidentiality of all proprietary and sensitive information shared during the term of this Agreement.

INTELLECTUAL PROPERTY RIGHTS:
All work product, including but not limited to designs, code, copy, and materials created under this Agreement shall be the exclusive property of the Client upon full payment. Service Provider retains the right to use work samples for portfolio purposes with Client approval.

WARRANTY:
Service Provider warrants that all work will be performed in a professional and timely manner, free from defects.

REVISION POLICY:
Client is entitled to {revisions} rounds of revisions. Additional revisions will be billed at $75 per hour.

TERMINATION:
Either party may terminate this Agreement with 14 days written notice. Upon termination, Client remains responsible for payment for all completed work.

LIABILITY:
In no event shall either party's liability exceed the total amount paid under this Agreement.

DISPUTE RESOLUTION:
Any disputes shall be resolved through mutual negotiation. If unresolved, disputes shall be handled through binding arbitration.

GOVERNING LAW:
This Agreement shall be governed by and construed in accordance with applicable law.

ENTIRE AGREEMENT:
This Agreement constitutes the entire agreement between the parties and supersedes all prior negotiations and understandings.

SIGNATURES:

CLIENT:

Name: ____________________________

Signature: ____________________________

Date: ____________________________


SERVICE PROVIDER:

Name: ____________________________

Signature: ____________________________

Date: ____________________________
"""
