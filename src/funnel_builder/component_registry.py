from __future__ import annotations

import copy
from dataclasses import dataclass
from functools import cached_property
from typing import Annotated, Any, Mapping, Sequence

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from .errors import InvalidOperation
from .models.funnel import ChoiceOption, ComponentKind


class BonusItem(BaseModel):
    title: str
    value: str


class FaqItem(BaseModel):
    question: str
    answer: str


@dataclass(frozen=True)
class PropertyField:
    """One editable property of a component kind, as shown in the properties panel."""

    name: str
    type: Any
    default: Any
    label: str

    @cached_property
    def adapter(self) -> TypeAdapter:
        return TypeAdapter(self.type)

    @property
    def type_name(self) -> str:
        return getattr(self.type, "__name__", None) or repr(self.type)

    def normalize(self, value: Any) -> Any:
        validated = self.adapter.validate_python(value)
        return self.adapter.dump_python(validated)


@dataclass(frozen=True)
class KindDefinition:
    kind: ComponentKind
    label: str
    category: str
    fields: Sequence[PropertyField]

    def field(self, name: str) -> PropertyField | None:
        for field in self.fields:
            if field.name == name:
                return field
        return None


def _text(name: str, default: str, label: str) -> PropertyField:
    return PropertyField(name=name, type=str, default=default, label=label)


def _optional_text(name: str, label: str) -> PropertyField:
    return PropertyField(name=name, type=str | None, default=None, label=label)


def _flag(name: str, default: bool, label: str) -> PropertyField:
    return PropertyField(name=name, type=bool, default=default, label=label)


def _count(name: str, default: int, label: str, *, ge: int = 0, le: int | None = None) -> PropertyField:
    return PropertyField(name=name, type=Annotated[int, Field(ge=ge, le=le)], default=default, label=label)


DEFAULT_COMPONENT_KINDS: Mapping[ComponentKind, KindDefinition] = {
    ComponentKind.heading: KindDefinition(
        kind=ComponentKind.heading,
        label="Título",
        category="Texto",
        fields=(
            _text("text", "Título da Seção", "Texto"),
            _count("level", 2, "Nível", ge=1, le=6),
            _text("font_size", "2rem", "Tamanho da fonte"),
            _text("font_weight", "700", "Peso da fonte"),
            _text("text_align", "center", "Alinhamento"),
            _optional_text("color", "Cor"),
        ),
    ),
    ComponentKind.paragraph: KindDefinition(
        kind=ComponentKind.paragraph,
        label="Texto",
        category="Texto",
        fields=(
            _text("text", "Seu texto aqui...", "Texto"),
            _text("font_size", "1rem", "Tamanho da fonte"),
            _text("text_align", "left", "Alinhamento"),
            _optional_text("color", "Cor"),
        ),
    ),
    ComponentKind.image: KindDefinition(
        kind=ComponentKind.image,
        label="Imagem",
        category="Mídia",
        fields=(
            _text("src", "", "URL da imagem"),
            _text("alt", "Imagem", "Texto alternativo"),
            _text("width", "100%", "Largura"),
            _text("border_radius", "8px", "Borda"),
        ),
    ),
    ComponentKind.video: KindDefinition(
        kind=ComponentKind.video,
        label="Vídeo",
        category="Mídia",
        fields=(
            _text("url", "", "URL do vídeo"),
            _flag("autoplay", False, "Reprodução automática"),
        ),
    ),
    ComponentKind.logo: KindDefinition(
        kind=ComponentKind.logo,
        label="Logo",
        category="Mídia",
        fields=(
            _text("src", "", "URL do logo"),
            _text("alt", "Logo", "Texto alternativo"),
            _text("width", "120px", "Largura"),
        ),
    ),
    ComponentKind.button: KindDefinition(
        kind=ComponentKind.button,
        label="Botão",
        category="Interação",
        fields=(
            _text("label", "Continuar", "Texto do botão"),
            _text("action", "next", "Ação"),
            _flag("disabled", False, "Desabilitado"),
            _text("background_color", "#3b82f6", "Cor de fundo"),
            _text("color", "#ffffff", "Cor do texto"),
        ),
    ),
    ComponentKind.text_input: KindDefinition(
        kind=ComponentKind.text_input,
        label="Campo",
        category="Interação",
        fields=(
            _text("name", "name", "Nome do campo"),
            _text("label", "Nome", "Rótulo"),
            _text("placeholder", "Digite seu nome", "Placeholder"),
            _text("input_type", "text", "Tipo"),
            _flag("required", True, "Obrigatório"),
        ),
    ),
    ComponentKind.choice_group: KindDefinition(
        kind=ComponentKind.choice_group,
        label="Opções",
        category="Interação",
        fields=(
            PropertyField(
                name="options",
                type=list[ChoiceOption],
                default=[
                    {"id": "1", "label": "Opção 1", "value": "option1", "image_ref": None},
                    {"id": "2", "label": "Opção 2", "value": "option2", "image_ref": None},
                ],
                label="Opções",
            ),
            _flag("allow_multiple", False, "Múltipla escolha"),
            _count("selection_limit", 1, "Limite de seleções", ge=1),
            _count("columns", 1, "Colunas", ge=1, le=4),
        ),
    ),
    ComponentKind.spacer: KindDefinition(
        kind=ComponentKind.spacer,
        label="Espaço",
        category="Layout",
        fields=(_text("height", "32px", "Altura"),),
    ),
    ComponentKind.divider: KindDefinition(
        kind=ComponentKind.divider,
        label="Divisor",
        category="Layout",
        fields=(
            _text("color", "#e5e7eb", "Cor"),
            _text("thickness", "1px", "Espessura"),
        ),
    ),
    ComponentKind.embed: KindDefinition(
        kind=ComponentKind.embed,
        label="Código",
        category="Avançado",
        fields=(
            _text("code", "", "Código"),
            _text("language", "html", "Linguagem"),
        ),
    ),
    ComponentKind.price: KindDefinition(
        kind=ComponentKind.price,
        label="Preço",
        category="Vendas",
        fields=(
            _text("price", "R$ 97,00", "Preço"),
            _optional_text("original_price", "Preço original"),
            _optional_text("installments", "Parcelamento"),
            _text("currency", "BRL", "Moeda"),
        ),
    ),
    ComponentKind.countdown: KindDefinition(
        kind=ComponentKind.countdown,
        label="Contador",
        category="Vendas",
        fields=(
            _count("duration_seconds", 900, "Duração (segundos)"),
            _text("label", "Oferta termina em", "Rótulo"),
        ),
    ),
    ComponentKind.testimonial: KindDefinition(
        kind=ComponentKind.testimonial,
        label="Depoimento",
        category="Vendas",
        fields=(
            _text("text", "Mudou minha forma de me vestir!", "Depoimento"),
            _text("author", "Cliente satisfeita", "Autor"),
            _optional_text("image_ref", "Foto"),
            _count("rating", 5, "Nota", ge=1, le=5),
        ),
    ),
    ComponentKind.guarantee: KindDefinition(
        kind=ComponentKind.guarantee,
        label="Garantia",
        category="Vendas",
        fields=(
            _count("days", 7, "Dias de garantia", ge=1),
            _text("title", "Garantia incondicional", "Título"),
            _text("text", "Se não gostar, devolvemos seu dinheiro.", "Texto"),
        ),
    ),
    ComponentKind.bonus: KindDefinition(
        kind=ComponentKind.bonus,
        label="Bônus",
        category="Vendas",
        fields=(PropertyField(name="items", type=list[BonusItem], default=[], label="Itens"),),
    ),
    ComponentKind.faq: KindDefinition(
        kind=ComponentKind.faq,
        label="FAQ",
        category="Vendas",
        fields=(PropertyField(name="items", type=list[FaqItem], default=[], label="Perguntas"),),
    ),
    ComponentKind.social_proof: KindDefinition(
        kind=ComponentKind.social_proof,
        label="Prova Social",
        category="Vendas",
        fields=(
            _count("count", 0, "Quantidade"),
            _text("text", "pessoas já fizeram o quiz", "Texto"),
        ),
    ),
    ComponentKind.progress: KindDefinition(
        kind=ComponentKind.progress,
        label="Progresso",
        category="Layout",
        fields=(
            _count("value", 0, "Valor", le=100),
            _flag("show_label", True, "Mostrar rótulo"),
        ),
    ),
}


class ComponentRegistry:
    """Kind table: property schema, defaults and validation per component kind.

    Keys not declared in a kind's schema are passed through untouched so that
    presentational overrides (colours, spacing) survive round trips.
    """

    def __init__(self, *, definitions: Mapping[ComponentKind, KindDefinition] = DEFAULT_COMPONENT_KINDS) -> None:
        self._definitions = dict(definitions)

    def definition(self, kind: ComponentKind | str) -> KindDefinition:
        try:
            return self._definitions[ComponentKind(kind)]
        except (KeyError, ValueError) as exc:
            raise InvalidOperation(f"Unknown component kind: {kind}") from exc

    def kinds(self) -> list[ComponentKind]:
        return list(self._definitions)

    def property_schema(self, kind: ComponentKind | str) -> tuple[PropertyField, ...]:
        return tuple(self.definition(kind).fields)

    def default_properties(self, kind: ComponentKind | str) -> dict[str, Any]:
        return {field.name: copy.deepcopy(field.default) for field in self.definition(kind).fields}

    def validate_properties(self, kind: ComponentKind | str, properties: Mapping[str, Any]) -> dict[str, Any]:
        definition = self.definition(kind)
        if not isinstance(properties, Mapping):
            raise InvalidOperation(f"Properties for {definition.kind.value} must be a mapping, got {properties!r}")
        normalized: dict[str, Any] = {}
        for name, value in properties.items():
            field = definition.field(name)
            if field is None:
                normalized[name] = copy.deepcopy(value)
                continue
            try:
                normalized[name] = field.normalize(value)
            except ValidationError as exc:
                raise InvalidOperation(
                    f"Invalid value for {definition.kind.value}.{name}: {exc.errors()[0]['msg']}"
                ) from exc
        return normalized

    def build_properties(self, kind: ComponentKind | str, overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
        merged = self.default_properties(kind)
        merged.update(overrides or {})
        return self.validate_properties(kind, merged)


DEFAULT_REGISTRY = ComponentRegistry()


__all__ = [
    "DEFAULT_COMPONENT_KINDS",
    "DEFAULT_REGISTRY",
    "BonusItem",
    "ComponentRegistry",
    "FaqItem",
    "KindDefinition",
    "PropertyField",
]
