"""Human-readable text for the action log and status message."""

from __future__ import annotations

from .types import AssetState, DefenseControlCard, JokerCard, PlayableCard, ThreatAgentCard

SUMMARY_LIMIT = 140


def summarize(text: str, max_len: int = SUMMARY_LIMIT) -> str:
    trimmed = text.strip()
    if len(trimmed) <= max_len:
        return trimmed
    return f"{trimmed[:max_len].strip()}…"


def explain_stage(state: AssetState) -> str:
    if state == "facedown":
        return "Stage: Observation (reveals a face-down asset)"
    if state == "revealed":
        return "Stage: Assessment (rotates a revealed asset)"
    return "Stage: PWN (destroys a rotated asset)"


def attack_details(card: PlayableCard, target_name: str, target_state: AssetState) -> str:
    lines = [f"Target: {target_name}", explain_stage(target_state)]
    if isinstance(card, ThreatAgentCard):
        lines.append(f"OWASP Risk: {card.risk.id} — {card.risk.name}")
        lines.append(f"Why this threat matters: {summarize(card.risk.description)}")
    elif isinstance(card, JokerCard):
        lines.append(f"Wildcard Attack: Joker ({card.color})")
        lines.append("Why it works: Wildcard attack (rule-based).")
    return "\n".join(lines)


def defense_details(defense: PlayableCard, attack: PlayableCard, target_name: str) -> str:
    if isinstance(defense, JokerCard):
        why = "Why it blocked: Joker is a wildcard defense."
    elif isinstance(defense, DefenseControlCard) and isinstance(attack, ThreatAgentCard):
        why = f"Why it blocked: Matching value ({defense.value} blocks {attack.value})."
    else:
        why = "Why it blocked: Rule match."

    if isinstance(defense, DefenseControlCard):
        return "\n".join(
            [
                f"Protected: {target_name}",
                f"OWASP Control: {defense.control.id} — {defense.control.name}",
                f"How this control helps: {summarize(defense.control.description)}",
                why,
            ]
        )
    return "\n".join([f"Protected: {target_name}", "OWASP Control: Joker (Wildcard Defense)", why])


def defense_name(card: PlayableCard) -> str:
    if isinstance(card, DefenseControlCard):
        return card.control.name
    return "Joker"
