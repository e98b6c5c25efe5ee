"""
Keyword-based transaction categorization.

Callers depend on :class:`TransactionCategorizer` and obtain an instance via
:func:`get_categorizer`, so a model-backed categorizer can replace the
rule-based one without touching the routers.
"""
from __future__ import annotations

import abc
from dataclasses import asdict, dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from app.models.common import Category, TransactionType

INCOME_CONFIDENCE = 0.5
FALLBACK_CONFIDENCE = 0.3
BASE_CONFIDENCE = 0.7

CATEGORY_KEYWORDS: Mapping[Category, Tuple[str, ...]] = MappingProxyType({
    Category.FOOD: (
        "restaurante", "lanchonete", "pizza", "hambúrguer", "comida",
        "padaria", "açougue", "supermercado", "mercado", "feira",
        "delivery", "uber eats", "ifood", "rappi", "café", "bar",
        "churrascaria", "sushi", "pão", "alimento", "grocery",
    ),
    Category.TRANSPORTATION: (
        "uber", "taxi", "ônibus", "metrô", "trem", "passagem",
        "combustível", "gasolina", "diesel", "estacionamento",
        "pedágio", "transporte", "viagem", "passagem aérea",
        "lyft", "bolt", "99", "car rental", "aluguel carro",
    ),
    Category.HEALTH: (
        "farmácia", "médico", "dentista", "hospital", "clínica",
        "remédio", "medicamento", "consulta", "cirurgia", "exame",
        "academia", "musculação", "yoga", "fisioterapia", "psicólogo",
        "saúde", "healthcare", "pharmacy", "doctor",
    ),
    Category.EDUCATION: (
        "escola", "universidade", "curso", "educação", "aula",
        "livro", "material escolar", "faculdade", "treinamento",
        "certificado", "workshop", "seminar", "learning", "tutor",
    ),
    Category.ENTERTAINMENT: (
        "cinema", "filme", "teatro", "show", "música", "concerto",
        "jogo", "game", "streaming", "netflix", "spotify", "prime",
        "diversão", "lazer", "parque", "passeio", "viagem",
        "disney", "ingresso", "ticket",
    ),
    Category.SUBSCRIPTIONS: (
        "assinatura", "subscription", "netflix", "spotify", "prime",
        "adobe", "microsoft", "apple", "google", "cloud", "hosting",
        "software", "app", "serviço", "mensal", "anual",
    ),
    Category.UTILITIES: (
        "água", "luz", "energia", "gás", "internet", "telefone",
        "conta", "fatura", "utilidade", "eletricidade", "utility",
        "electric", "water", "gas", "internet provider",
    ),
    Category.INSURANCE: (
        "seguro", "insurance", "apólice", "proteção", "cobertura",
        "saúde", "vida", "carro", "casa", "responsabilidade",
    ),
    Category.SALARY: (
        "salário", "salary", "pagamento", "payment", "depósito",
        "vencimento", "remuneração", "ganho", "income", "earnings",
    ),
    Category.INVESTMENT: (
        "investimento", "ação", "stock", "fundo", "fund", "bitcoin",
        "cripto", "bolsa", "tesouro", "renda fixa", "aplicação",
        "broker", "corretora", "dividendo",
    ),
    Category.OTHER: (),
})


@dataclass(frozen=True)
class CategorizationResult:
    category: Category
    confidence: float
    automatic: bool = True

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["category"] = self.category.value
        return data


def keyword_confidence(keyword: str) -> float:
    """Longer keywords are more specific, so they score higher (capped at 1)."""
    return min(1.0, BASE_CONFIDENCE + len(keyword) / 50)


def categorize_transaction(
    description: Optional[str],
    amount: int,
    type: Union[TransactionType, str],
) -> CategorizationResult:
    """
    Pick the category whose keyword best matches ``description``.

    Income is never keyword-matched. Among expense matches the highest
    confidence wins; on equal confidence the first match in table order is
    kept. ``amount`` is accepted for interface parity and not used.
    """
    if TransactionType(type) is TransactionType.INCOME:
        return CategorizationResult(Category.SALARY, INCOME_CONFIDENCE)

    normalized = (description or "").lower().strip()

    best: Optional[CategorizationResult] = None
    for category, keywords in CATEGORY_KEYWORDS.items():
        for keyword in keywords:
            if keyword not in normalized:
                continue
            confidence = keyword_confidence(keyword)
            if best is None or confidence > best.confidence:
                best = CategorizationResult(category, confidence)

    if best is not None:
        return best

    return CategorizationResult(Category.OTHER, FALLBACK_CONFIDENCE)


class TransactionCategorizer(abc.ABC):
    """Assigns a spending category to a transaction."""

    @abc.abstractmethod
    async def categorize(
        self,
        description: str,
        amount: int,
        type: Union[TransactionType, str],
    ) -> CategorizationResult:
        ...


class RuleBasedCategorizer(TransactionCategorizer):
    async def categorize(
        self,
        description: str,
        amount: int,
        type: Union[TransactionType, str],
    ) -> CategorizationResult:
        return categorize_transaction(description, amount, type)


_CATEGORIZERS = {
    "rules": RuleBasedCategorizer,
}


def get_categorizer(backend: Optional[str] = None) -> TransactionCategorizer:
    """Return the categorizer configured by ``CATEGORIZER_BACKEND``."""
    if backend is None:
        from app.core.config import settings

        backend = settings.CATEGORIZER_BACKEND

    try:
        return _CATEGORIZERS[backend]()
    except KeyError:
        raise ValueError(f"Unknown categorizer backend: {backend!r}") from None
