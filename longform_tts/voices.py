"""Voice selector resolution: prebuilt Gemini voices and styled presets."""

from longform_tts.models import VoiceProfile

# Prebuilt Gemini TTS voices (hardcoded, no network call needed)
VOICE_POOL = [
    "Zephyr", "Puck", "Charon", "Kore", "Fenrir", "Leda", "Orus", "Aoede",
    "Callirrhoe", "Autonoe", "Enceladus", "Iapetus", "Umbriel", "Algieba",
    "Despina", "Erinome", "Algenib", "Rasalgethi", "Laomedeia", "Achernar",
    "Alnilam", "Schedar", "Gacrux", "Pulcherrima", "Achird", "Zubenelgenubi",
    "Vindemiatrix", "Sadachbia", "Sadaltager", "Sulafat",
]

# Styled presets: a prebuilt voice plus a delivery instruction
VOICE_PRESETS = {
    "gemini-dream": VoiceProfile(
        voice="Zephyr",
        prompt_prefix="Speak in a softer, gentler version of the Fenrir voice: ",
    ),
    "velocity-prime": VoiceProfile(
        voice="Fenrir",
        prompt_prefix="Read very fast and decisively: ",
    ),
    "raven-horror": VoiceProfile(
        voice="Fenrir",
        prompt_prefix=(
            "Read in a male US English accent. The tone must be frightening, "
            "dark and full of suspense, at about 130 words per minute: "
        ),
    ),
    "phantom-horror": VoiceProfile(
        voice="Fenrir",
        prompt_prefix=(
            "Read in a male US English accent. Haunting, low and deeply expressive, "
            "like telling a ghost story, about 30% faster than normal: "
        ),
    ),
    "lyra-resilient": VoiceProfile(
        voice="Zephyr",
        prompt_prefix="Read in a female US English accent, resilient and reflective: ",
    ),
    "shadow-creep": VoiceProfile(
        voice="Fenrir",
        prompt_prefix="Read in a creepy, unsettling whisper: ",
    ),
}

PRESET_DESCRIPTIONS = {
    "gemini-dream": "Experimental dreamy voice",
    "velocity-prime": "Very fast, decisive delivery",
    "raven-horror": "US English male, horror storytelling (130 wpm)",
    "phantom-horror": "US English male, haunting and expressive (+30% speed)",
    "lyra-resilient": "US English female, resilient and reflective",
    "shadow-creep": "Creepy whisper",
}


def resolve_voice(selector: str) -> VoiceProfile:
    """Resolve a user-facing voice selector to a VoiceProfile.

    Presets match exactly; prebuilt voice names match case-insensitively.
    """
    if selector in VOICE_PRESETS:
        return VOICE_PRESETS[selector]

    for voice in VOICE_POOL:
        if voice.lower() == selector.strip().lower():
            return VoiceProfile(voice=voice)

    raise ValueError(f"Unknown voice: {selector!r}")


def list_selectors(filter_str: str | None = None) -> list[tuple[str, str]]:
    """All (selector, description) pairs, optionally filtered by substring."""
    entries = [(name, PRESET_DESCRIPTIONS.get(name, "")) for name in VOICE_PRESETS]
    entries += [(voice, "Prebuilt voice") for voice in VOICE_POOL]
    if filter_str:
        needle = filter_str.lower()
        entries = [e for e in entries if needle in e[0].lower() or needle in e[1].lower()]
    return entries
