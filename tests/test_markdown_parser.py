import pytest

from guide_agent.guide import (
    ANALYSIS_PLACEHOLDER,
    COSTS_PLACEHOLDER,
    SUMMARY_PLACEHOLDER,
    TIMELINE_PLACEHOLDER,
)
from guide_agent.llm.types import RawCompletion
from guide_agent.parsing.lists import infer_risk_level, parse_risk, split_head_tail
from guide_agent.parsing.markdown_parser import MarkdownGuideParser, parse_markdown_guide
from guide_agent.parsing.sections import find_section, split_sections
from guide_agent.parsing.steps import parse_steps


GEMINI_REPLY = """Aquí tienes la guía:

## Resumen Ejecutivo
Automatiza la respuesta a cotizaciones en menos de dos horas.

## Caso de Uso Específico
El equipo comercial tarda dos días en responder cotizaciones.

## Herramientas de IA a Utilizar
* **ChatGPT**: Redacta borradores de cotización.
* **Canva AI**: Genera la presentación visual.
- NotebookLM - Centraliza las políticas de precios.

## Arquitectura Simplificada (No Técnica)
Usuario → Prompt estructurado → IA → Revisión humana → Entrega final
* Plantilla de prompt
* Revisión humana

## Paso a Paso de Implementación (2 Horas o Menos)
1. **[ChatGPT] Preparación de Entorno (Minuto 0-15)**
   Configura una nueva conversación.
   Pega el prompt de contexto.
2. **[Canva] Diseño Final (Minuto 15-30)**
   Exporta el contenido a Canva.

## Plantillas Clave
Actúa como asesor comercial y redacta...

## Costos Estimados (USD)
* Plan gratuito viable: límite de mensajes
* Plan recomendado: 20-40 USD/mes

## Riesgos y Limitaciones
* Errores de la IA: revisión humana obligatoria (riesgo alto)
* Dependencia de prompts: documentar plantillas, impacto bajo
* Curva de aprendizaje

## Casos de Uso Adicionales
* Respuestas a reclamos
* Propuestas comerciales

## Cronograma Estimado
Implementación en una tarde.

## Indicadores de Impacto Rápido
* Reducción de tiempo en 60%
* Más cotizaciones enviadas por semana
"""


def test_documented_step_scenario():
    text = (
        "1. **[ChatGPT] Kickoff (Minuto 0-15)**\nConfigure chat.\n"
        "2. **[Canva] Export (Minuto 15-30)**\nExport asset."
    )

    steps = parse_steps(text)

    assert len(steps) == 2
    first, second = steps
    assert (first.index, first.tool, first.title, first.duration_label, first.description) == (
        1,
        "ChatGPT",
        "Kickoff",
        "Minuto 0-15",
        "Configure chat.",
    )
    assert (second.index, second.tool, second.title, second.duration_label, second.description) == (
        2,
        "Canva",
        "Export",
        "Minuto 15-30",
        "Export asset.",
    )


def test_full_reply_fills_every_field():
    guide = parse_markdown_guide(GEMINI_REPLY)

    assert guide.summary.startswith("Automatiza")
    assert guide.request_analysis.startswith("El equipo comercial")
    assert [item.name for item in guide.recommended_items] == ["ChatGPT", "Canva AI", "NotebookLM"]
    assert guide.recommended_items[2].description == "Centraliza las políticas de precios."
    assert guide.architecture.description == "Usuario → Prompt estructurado → IA → Revisión humana → Entrega final"
    assert guide.architecture.components == ["Plantilla de prompt", "Revisión humana"]
    assert len(guide.steps) == 2
    assert guide.steps[0].description == "Configura una nueva conversación.\nPega el prompt de contexto."
    assert guide.templates.startswith("Actúa como asesor")
    assert "20-40 USD/mes" in guide.costs_summary
    assert [risk.level for risk in guide.risks] == ["high", "low", "medium"]
    assert guide.risks[0].description == "Errores de la IA"
    assert guide.risks[2].description == "Curva de aprendizaje"
    assert guide.risks[2].mitigation == ""
    assert guide.next_steps == ["Respuestas a reclamos", "Propuestas comerciales"]
    assert guide.timeline_label == "Implementación en una tarde."
    assert guide.success_metrics == ["Reducción de tiempo en 60%", "Más cotizaciones enviadas por semana"]


def test_recognized_headings_never_yield_placeholders():
    guide = parse_markdown_guide(GEMINI_REPLY)

    assert guide.summary != SUMMARY_PLACEHOLDER
    assert guide.request_analysis != ANALYSIS_PLACEHOLDER
    assert guide.costs_summary != COSTS_PLACEHOLDER
    assert guide.timeline_label != TIMELINE_PLACEHOLDER
    assert guide.recommended_items and guide.steps and guide.risks
    assert guide.next_steps and guide.success_metrics


def test_heading_match_ignores_case_and_accents():
    text = (
        "## RESUMEN EJECUTIVO\nResumen.\n\n"
        "## Analisis de la solicitud\nAnálisis.\n\n"
        "## pasos de implementacion\n1. Preparar: abrir ChatGPT\n2. Publicar: compartir\n\n"
        "## Próximos pasos\n* Medir resultados\n\n"
        "## Métricas de Éxito\n* Tiempo ahorrado\n"
    )

    guide = parse_markdown_guide(text)

    assert guide.summary == "Resumen."
    assert guide.request_analysis == "Análisis."
    assert [step.title for step in guide.steps] == ["Preparar", "Publicar"]
    assert guide.next_steps == ["Medir resultados"]
    assert guide.success_metrics == ["Tiempo ahorrado"]


def test_missing_sections_degrade_to_placeholders():
    guide = parse_markdown_guide("## Resumen Ejecutivo\nSolo resumen.")

    assert guide.summary == "Solo resumen."
    assert guide.request_analysis == ANALYSIS_PLACEHOLDER
    assert guide.costs_summary == COSTS_PLACEHOLDER
    assert guide.timeline_label == TIMELINE_PLACEHOLDER
    assert guide.steps == []
    assert guide.risks == []
    assert guide.recommended_items == []
    assert guide.next_steps == []
    assert guide.success_metrics == []


def test_reply_without_headings_keeps_text_as_summary():
    guide = parse_markdown_guide("Respuesta libre sin encabezados.")

    assert guide.summary == "Respuesta libre sin encabezados."
    assert guide.steps == []


def test_subheadings_stay_inside_section_body():
    sections = split_sections("## Plantillas Clave\n### Prompt 1\nTexto\n## Riesgos\n* Uno")

    assert sections == [("Plantillas Clave", "### Prompt 1\nTexto"), ("Riesgos", "* Uno")]


def test_first_matching_heading_wins():
    sections = split_sections("## Costos Estimados\nprimero\n## Costos Estimados\nsegundo")

    assert find_section(sections, ["Costos"]) == "primero"
    assert find_section(sections, ["Inexistente"]) is None


def test_legacy_steps_are_capped_and_indexed_by_position():
    body = "\n".join(f"{n}. Paso número {n}: hacer algo" for n in range(1, 16))

    steps = parse_steps(body)

    assert len(steps) == 12
    assert [step.index for step in steps] == list(range(1, 13))
    assert steps[0].title == "Paso número 1"
    assert steps[0].description == "hacer algo"
    assert steps[0].tool == "General"
    assert steps[0].duration_label == "Variable"


def test_numbering_gaps_do_not_leak_into_indices():
    body = "1. **[ChatGPT] Uno (5 min)**\nA\n4. **[Canva] Cuatro (10 min)**\nB"

    steps = parse_steps(body)

    assert [step.index for step in steps] == [1, 2]
    assert steps[1].title == "Cuatro"


def test_malformed_step_lines_degrade_without_raising():
    steps = parse_steps("1. sin formato alguno\n2) **Solo título**\nalgo")

    assert len(steps) == 1
    assert steps[0].title == "Solo título"
    assert steps[0].tool == "General"
    assert steps[0].description == "algo"

    legacy = parse_steps("1. sin formato alguno\n2) otra línea")
    assert [step.title for step in legacy] == ["Paso 1", "Paso 2"]
    assert legacy[0].description == "sin formato alguno"


def test_bullet_lists_are_capped():
    body = "\n".join(f"* **Herramienta {n}**: uso {n}" for n in range(10))
    guide = parse_markdown_guide(f"## Herramientas de IA\n{body}\n## Riesgos\n{body}")

    assert len(guide.recommended_items) == 6
    assert len(guide.risks) == 5


def test_bold_paragraphs_and_rules_are_not_bullets():
    guide = parse_markdown_guide("## Indicadores\n**Nota importante**\n---\n* Ahorro de tiempo")

    assert guide.success_metrics == ["Ahorro de tiempo"]


def test_head_tail_split_variants():
    assert split_head_tail("**ChatGPT:** redacta") == ("ChatGPT", "redacta")
    assert split_head_tail("Canva: diseña") == ("Canva", "diseña")
    assert split_head_tail("Auto-completado - ahorra tiempo") == ("Auto-completado", "ahorra tiempo")
    assert split_head_tail("Sin separador") == ("Sin separador", None)


def test_risk_level_inference():
    assert infer_risk_level("Fuga de datos (riesgo alto)") == "high"
    assert infer_risk_level("Impacto BAJO") == "low"
    assert infer_risk_level("Nivel medio") == "medium"
    assert infer_risk_level("Sin nivel") == "medium"
    assert infer_risk_level("Riesgo [bajo]: aunque el costo sea alto") == "low"

    risk = parse_risk("**Alucinaciones** [alto]: revisión humana")
    assert (risk.description, risk.level, risk.mitigation) == ("Alucinaciones", "high", "revisión humana")


def test_parser_strategy_reads_raw_completion_and_rejects_declined():
    parser = MarkdownGuideParser()
    raw = RawCompletion(text=GEMINI_REPLY, model="gemini-2.0-flash")

    assert parser.parse(raw).summary.startswith("Automatiza")

    with pytest.raises(ValueError):
        parser.parse(raw, out_of_scope=True)


def test_fenced_reply_is_unwrapped():
    guide = parse_markdown_guide("```markdown\n## Resumen Ejecutivo\nDentro del bloque.\n```")

    assert guide.summary == "Dentro del bloque."


def test_parentheses_in_step_titles_do_not_merge_steps():
    body = (
        "1. **[ChatGPT] Crear GPT personalizado (Custom GPT) (Minuto 0-30)**\n"
        "Abre el editor.\n"
        "2. **[ChatGPT] Probar (modo vista previa) (Minuto 30-45)**\n"
        "Envía tres ejemplos.\n"
        "3. **[Canva] Exportar (Minuto 45-60)**\n"
        "Descarga el PDF."
    )

    steps = parse_steps(body)

    assert [(step.index, step.title, step.duration_label, step.description) for step in steps] == [
        (1, "Crear GPT personalizado (Custom GPT)", "Minuto 0-30", "Abre el editor."),
        (2, "Probar (modo vista previa)", "Minuto 30-45", "Envía tres ejemplos."),
        (3, "Exportar", "Minuto 45-60", "Descarga el PDF."),
    ]
