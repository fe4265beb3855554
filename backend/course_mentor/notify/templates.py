"""Motivational email templates."""

from __future__ import annotations

import html
import random
from dataclasses import dataclass
from string import Template
from typing import Callable, Sequence

INACTIVITY_EMAIL_TYPE = "inactividad_15_dias"


@dataclass(frozen=True, slots=True)
class EmailTemplate:
    name: str
    subject: Template
    body: Template


@dataclass(frozen=True, slots=True)
class RenderedEmail:
    template: str
    subject: str
    html: str


MISS_YOU = EmailTemplate(
    name="te_extranamos",
    subject=Template("¡Te extrañamos en $class_name! 🤖"),
    body=Template(
        """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h1>¡Hola $student_name! 👋</h1>
  <p>Tu mentor de IA te extraña.</p>
  <p>He notado que no has interactuado conmigo en los últimos <strong>$days_inactive días</strong>
  en la clase de <strong>$class_name</strong>. ¡Me preocupa que te estés perdiendo de contenido valioso! 😊</p>
  <h3>🚀 ¿Sabías que puedo ayudarte con?</h3>
  <ul>
    <li>Resolver dudas sobre los temas de la clase</li>
    <li>Explicar conceptos paso a paso</li>
    <li>Analizar ejemplos y casos reales</li>
  </ul>
  <p><strong>💡 Tip del día:</strong> una pregunta simple puede abrirte todo un mundo de posibilidades.</p>
  <p><a href="$chat_url">💬 Volver al Chat</a></p>
  <p><strong>⏰ Recuerda:</strong> La consistencia es clave en el aprendizaje. ¡Incluso 5 minutos al día pueden hacer la diferencia!</p>
  <p style="color: #6b7280; font-size: 14px;">Este correo fue enviado automáticamente por tu mentor de IA 🤖<br>
  Si no deseas recibir estos recordatorios, contacta a tu profesor.</p>
</div>
"""
    ),
)

NEW_TIPS = EmailTemplate(
    name="consejos_nuevos",
    subject=Template("$student_name, ¡tu mentor de IA tiene consejos nuevos! 🎯"),
    body=Template(
        """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h1>¡$student_name! 🌟</h1>
  <p>Es momento de continuar tu aprendizaje.</p>
  <p>Han pasado <strong>$days_inactive días</strong> desde nuestra última conversación en
  <strong>$class_name</strong>. ¡Tengo muchos insights nuevos que compartir contigo! 🚀</p>
  <p><strong>🔥 Pregunta del día:</strong> ¿qué concepto de la clase te gustaría dominar esta semana?</p>
  <p><a href="$chat_url">🚀 Hacer Pregunta</a></p>
  <p style="color: #6b7280; font-size: 14px;">Tu mentor de IA siempre está aquí para apoyarte 💪<br>
  Clase: $class_name</p>
</div>
"""
    ),
)

MOTIVATIONAL_TEMPLATES: tuple[EmailTemplate, ...] = (MISS_YOU, NEW_TIPS)

Selector = Callable[[Sequence[EmailTemplate]], EmailTemplate]


class TemplateRenderer:
    """Pick a template with ``selector`` and fill it with escaped values."""

    def __init__(
        self,
        base_url: str,
        selector: Selector | None = None,
        templates: Sequence[EmailTemplate] = MOTIVATIONAL_TEMPLATES,
    ) -> None:
        if not templates:
            raise ValueError("at least one template is required")
        self.chat_url = base_url.rstrip("/") + "/dashboard/chat"
        self.selector = selector or random.Random().choice
        self.templates = templates

    def render(self, student_name: str, class_name: str, days_inactive: int) -> RenderedEmail:
        template = self.selector(self.templates)
        subject_values = {
            "student_name": student_name,
            "class_name": class_name,
            "days_inactive": days_inactive,
        }
        body_values = {key: html.escape(str(value)) for key, value in subject_values.items()}
        body_values["chat_url"] = html.escape(self.chat_url, quote=True)
        return RenderedEmail(
            template=template.name,
            subject=template.subject.substitute(subject_values),
            html=template.body.substitute(body_values),
        )


__all__ = [
    "EmailTemplate",
    "RenderedEmail",
    "TemplateRenderer",
    "MOTIVATIONAL_TEMPLATES",
    "INACTIVITY_EMAIL_TYPE",
]
