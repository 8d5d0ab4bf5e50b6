"""Prompts para el modelo (análisis NGLE y generación de oraciones).

Por qué en un módulo aparte:
- El texto de los prompts es largo y cambia por motivos lingüísticos, no de
  código; así el gateway queda legible.
- El ejemplo one-shot se reutiliza en los tests como respuesta canónica.

La guía de etiquetas es orientativa: el modelo puede devolver etiquetas que
no aparecen aquí y el resto del sistema las trata como texto libre.
"""

from __future__ import annotations


ONE_SHOT_SENTENCE = "Juan come manzanas"

ONE_SHOT_JSON = """{
  "fullSentence": "Juan come manzanas",
  "classification": "Oración simple, predicativa, activa, transitiva",
  "structure": [
    {
      "text": "Juan",
      "label": "SN Sujeto",
      "children": [
        { "text": "Juan", "label": "N (N)" }
      ]
    },
    {
      "text": "come manzanas",
      "label": "SV - Predicado verbal",
      "children": [
        { "text": "come", "label": "V (N)" },
        {
          "text": "manzanas",
          "label": "SN - CD",
          "children": [
             { "text": "manzanas", "label": "N (N)" }
          ]
        }
      ]
    }
  ]
}"""

ONE_SHOT_EXAMPLE = (
    f'Ejemplo de formato JSON esperado para la oración "{ONE_SHOT_SENTENCE}":\n'
    f"{ONE_SHOT_JSON}\n"
)

NGLE_ANALYSIS_RULES = (
    "**OBJETIVO GENERAL:**\n"
    "Producir un árbol sintáctico que refleje la estructura gramatical según la NGLE.\n"
    "**REGLA VISUAL IMPORTANTE:** En el nivel más alto (la base del árbol), el Sujeto y el Predicado "
    "deben estar al mismo nivel jerárquico en el array 'structure'.\n\n"
    "**FORMATO JSON REQUERIDO:**\n"
    "El objeto raíz debe tener:\n"
    "- 'fullSentence': La oración completa (si generas una, ponla aquí).\n"
    "- 'classification': Clasificación detallada de la oración.\n"
    "- 'structure': Un array de elementos sintácticos (objetos con 'text', 'label' y opcionalmente "
    "'children' recursivos).\n\n"
    f"{ONE_SHOT_EXAMPLE}\n"
    "**GUÍA DE ETIQUETAS (NGLE):**\n\n"
    "1.  **Nivel Oracional Principal:**\n"
    "    *   'SN Sujeto': Sintagma Nominal Sujeto activo (SOLO si es un Sintagma Nominal estándar).\n"
    "    *   'SN Sujeto paciente': Usar OBLIGATORIAMENTE si la oración es PASIVA (perifrástica con ser + "
    "participio) o PASIVA REFLEJA (con 'se' y concordancia).\n"
    "    *   **SI EL SUJETO ES UNA ORACIÓN SUBORDINADA RELATIVA (Libre/Semilibre):** NO USAR 'SN Sujeto'. "
    "Usar directamente la etiqueta de la oración (ej: 'Oración - Subordinada Relativa Semilibre de Sujeto').\n"
    "    *   'SV - Predicado verbal' o 'SV - Predicado nominal'.\n"
    "    *   'ST': Sujeto Tácito.\n\n"
    "2.  **Sintagmas y Núcleos:**\n"
    "    *   'SN', 'SAdj', 'SAdv', 'SPrep'.\n"
    "    *   Núcleos: 'N (N)', 'V (N)', 'Adj (N)', 'Adv (N)', 'Prep (N)'.\n"
    "    *   'Det', 'nx' (nexo), 'Pron', 'Interj'.\n\n"
    "3.  **Funciones:**\n"
    "    *   'SN - CD', 'SN - CI', 'SN - Atrib', 'SN - CPred'.\n"
    "    *   'SPrep - CD', 'SPrep - CI', 'SPrep - CRég', 'SPrep - CAg', 'SPrep - CN', 'SPrep - CAdj', "
    "'SPrep - CAdv'.\n"
    "    *   'SPrep - CC de [Lugar/Tiempo/Modo/etc.]'.\n\n"
    "4.  **Oraciones Complejas (Subordinadas):**\n\n"
    "    *   **Subordinadas Sustantivas:**\n"
    "        *   'Oración - Subordinada Sustantiva de Sujeto', '... de CD', '... de Término', etc.\n\n"
    "    *   **Subordinadas Relativas con Antecedente:**\n"
    "        *   Etiqueta: 'Oración - Subordinada Relativa Especificativa (CN)' o 'Explicativa (CN)'.\n"
    "        *   Deben ser hijas del SN antecedente.\n\n"
    "    *   **Subordinadas Relativas LIBRES y SEMILIBRES (Sin antecedente):**\n"
    "        *   **REGLA CRÍTICA (Sujeto):** Si funcionan como SUJETO, **NO las incluyas dentro de un nodo "
    "'SN Sujeto'**. El nodo 'Oración - Subordinada Relativa Semilibre de Sujeto' (o Libre) debe ser "
    "hermano directo del 'SV - Predicado'.\n"
    "        *   Estructura Libre (quien, donde...): 'Oración - Subordinada Relativa Libre de [Función]'.\n"
    "        *   Estructura Semilibre (el que, la que, lo que...): 'Oración - Subordinada Relativa "
    "Semilibre de [Función]'.\n"
    '        *   Ejemplo Sujeto: "Quien canta su mal espanta".\n'
    "            *   Hijo 1: \"Quien canta\" -> 'Oración - Subordinada Relativa Libre de Sujeto' "
    "(NO dentro de SN).\n"
    "            *   Hijo 2: \"su mal espanta\" -> 'SV - Predicado verbal'.\n\n"
    "    *   **Subordinadas Construcciones (Antes Adverbiales):**\n"
    "        *   Se denominan 'Construcciones' en la NGLE.\n"
    "        *   **UBICACIÓN:** Deben estar SIEMPRE DENTRO del 'SV - Predicado verbal'.\n"
    "        *   **Tipos:**\n"
    "            *   'Oración - Subordinada Construcción de Tiempo' (o Temporal).\n"
    "            *   'Oración - Subordinada Construcción de Lugar' (o Locativa).\n"
    "            *   'Oración - Subordinada Construcción de Modo' (o Modal).\n"
    "            *   'Oración - Subordinada Construcción Causal'.\n"
    "            *   'Oración - Subordinada Construcción Final'.\n"
    "            *   'Oración - Subordinada Construcción Condicional'.\n"
    "            *   'Oración - Subordinada Construcción Concesiva'.\n"
    "            *   'Oración - Subordinada Construcción Consecutiva' (Bimembre: cuantificador en principal "
    "+ coda consecutiva).\n"
    "            *   'Oración - Subordinada Construcción Comparativa' (Bimembre: cuantificador en principal "
    "+ coda comparativa).\n"
    "            *   'Oración - Subordinada Construcción Ilativa'.\n"
    "        *   **Estructura:**\n"
    "            *   El nexo ('nx') va DENTRO de la subordinada, como primer hijo.\n"
    "            *   El resto es el predicado o estructura interna de la construcción.\n"
    "            *   Si es bimembre (Comparativa/Consecutiva), el nexo (que, como) introduce el segundo "
    "segmento (la coda).\n\n"
    "    *   **Subordinadas Superlativas:**\n"
    "        *   'Oración - Subordinada Superlativa'. Estructura relativa compleja asociada a cuantificadores.\n\n"
    "Proporciona SOLO el objeto JSON.\n"
)


def build_analysis_prompt(sentence: str) -> str:
    return (
        "Analiza sintácticamente la siguiente oración en español según los principios de la Nueva "
        "Gramática de la Lengua Española (NGLE) y proporciona la estructura en formato JSON. "
        f"La oración es: '{sentence}'.\n\n"
        f"{NGLE_ANALYSIS_RULES}"
    )


def build_generation_prompt(criteria: str) -> str:
    return (
        "Actúa como un experto profesor de lengua española.\n"
        "Tu tarea es GENERAR UNA (1) oración en español natural y gramaticalmente correcta que cumpla "
        f'estrictamente con los siguientes requisitos: "{criteria}".\n\n'
        "IMPORTANTE:\n"
        "- Devuelve SOLAMENTE el texto de la oración.\n"
        '- NO incluyas comillas, ni introducciones tipo "Aquí tienes la oración:", ni explicaciones.\n'
        "- El texto debe estar listo para ser copiado y pegado en un analizador sintáctico.\n"
    )
