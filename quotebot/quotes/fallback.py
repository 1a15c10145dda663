FALLBACKS_EN = (
    "Small commits, big momentum. Ship something today.",
    "Readability is a feature. Future you will thank present you.",
)

FALLBACKS_MM = (
    "နေ့တိုင်းအနည်းငယ်တိုးတက်ပါ—အဆုံးမှာကြီးမားတဲ့အမှတ်တံဆိပ်ဖြစ်မယ်။",
    "စိတ်ရှည်ပြီး ကုဒ်ကို သန့်ရှင်း စာလုံးဖတ်ရလွယ်အောင် ရေးပါ—နောင်တချိန်က သင့်ကိုယ်တိုင်ပဲ ကျေးဇူးတင်မယ်။",
)


def fallback_quote(language: str) -> str:
    """Static quote used when generation fails. Unknown languages get English."""
    if language == "MM":
        return FALLBACKS_MM[0]
    if language == "EN_MM":
        return f"{FALLBACKS_EN[0]}\n{FALLBACKS_MM[0]}"
    return FALLBACKS_EN[0]
