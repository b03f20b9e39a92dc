"""Renderer — moteur de template {{path}} / {{#if}} / {{#each}}."""
from .template import render_template, render_template_file, escape_html, is_truthy

__all__ = ["render_template", "render_template_file", "escape_html", "is_truthy"]
