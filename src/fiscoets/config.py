"""Fiscal constants and coded descriptions for the compliance tests.

Values follow the Codice del Terzo Settore (D.Lgs. 117/2017, art. 79-80)
and D.M. 19/05/2021 on secondary activities.
"""

from decimal import Decimal

# ============================================================================
# TEST DI COMMERCIALITA'
# ============================================================================

# Income may exceed effective costs by at most 6% before an AIG is commercial
AIG_MARGIN_FACTOR = Decimal("1.06")

# Secondary-activity limits
SECONDARY_INCOME_SHARE = Decimal("0.30")
SECONDARY_COST_SHARE = Decimal("0.66")

# ============================================================================
# IRES
# ============================================================================

FORFETARIO_REVENUE_CEILING = Decimal("85000")
FORFETARIO_COEFFICIENT_APS = Decimal("0.0072")
FORFETARIO_COEFFICIENT_DEFAULT = Decimal("0.0024")
IRES_RATE = Decimal("0.24")

# ============================================================================
# DESCRIZIONI CODIFICATE
# ============================================================================

AIG_INCOME_DESCRIPTIONS = {
    1: "Entrate dagli associati per attività mutuali",
    2: "Prestazioni e cessioni a iscritti, associati e fondatori",
    3: "Contributi da soggetti privati",
    4: "Prestazioni e cessioni a terzi",
    5: "Contributi da enti pubblici",
    6: "Entrate da contratti con enti pubblici",
    7: "Altri ricavi, rendite e proventi",
    8: "Rimanenze finali",
}

AIG_EXPENSE_DESCRIPTIONS = {
    1: "Materie prime",
    2: "Servizi",
    3: "Godimento beni di terzi",
    4: "Personale",
    5: "Ammortamenti",
    6: "Accantonamenti",
    7: "Oneri e uscite diverse",
    8: "Rimanenze iniziali",
    9: "Costi su rapporti bancari",
    10: "Costi su prestiti",
}

DIVERSE_INCOME_DESCRIPTIONS = {
    1: "Prestazioni ad associati",
    2: "Contributi privati",
    3: "Prestazioni a terzi",
    4: "Contributi pubblici",
    5: "Contratti pubblici",
    6: "Sponsorizzazioni",
    7: "Altre entrate",
}

DIVERSE_EXPENSE_DESCRIPTIONS = {
    1: "Materie prime",
    2: "Servizi",
    3: "Godimento beni di terzi",
    4: "Personale",
    5: "Uscite diverse",
}

# AIG income from members only, left out of TER for APS
MEMBER_ONLY_CODES = frozenset({1, 2})

# Diverse-activity sponsorship income, left out of the entity aggregate
SPONSORSHIP_CODE = 6
