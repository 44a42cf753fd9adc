"""Diagnosis narrative templates.

One template per (diagnosis, age group). Placeholders:
- {{name}}: patient name token
- {{subject}} / {{Subject}}: han, hon, hen
- {{object}}: honom, henne, hen
- {{possessive}} / {{Possessive}}: hans, hennes, hens

Capitalised placeholders are used at the start of a sentence.
"""

from dataclasses import dataclass
from typing import Optional

from clinassess.catalog.profiles import AgeGroup, Diagnosis, Sex


@dataclass(frozen=True)
class PronounFamily:
    """Swedish third-person pronoun forms."""
    subject: str
    object: str
    possessive: str


PRONOUNS = {
    Sex.MALE: PronounFamily(subject="han", object="honom", possessive="hans"),
    Sex.FEMALE: PronounFamily(subject="hon", object="henne", possessive="hennes"),
    Sex.NONBINARY: PronounFamily(subject="hen", object="hen", possessive="hens"),
}


@dataclass(frozen=True)
class DiagnosisNarrative:
    """Pre-written narrative for a diagnosis and age group."""
    diagnosis: Diagnosis
    age_group: AgeGroup
    template: str
    notice: Optional[str] = None  # Shown above the text, never exported


DIAGNOSIS_NARRATIVES = {
    # =========================================================================
    # ADHD
    # =========================================================================
    (Diagnosis.ADHD, AgeGroup.CHILD): DiagnosisNarrative(
        diagnosis=Diagnosis.ADHD,
        age_group=AgeGroup.CHILD,
        template=(
            "Utredningen visar att {{name}} uppfyller kriterierna för ADHD. "
            "{{Subject}} har sedan tidig ålder haft svårigheter med uppmärksamhet, "
            "aktivitetsnivå och impulskontroll som påverkar {{possessive}} vardag "
            "både hemma och i skolan. {{Subject}} behöver tydlig struktur, korta "
            "instruktioner och vuxna som hjälper {{object}} att komma igång och "
            "hålla fokus. Med rätt anpassningar i förskola och skola har {{subject}} "
            "goda förutsättningar att utvecklas och lära sig."
        ),
    ),
    (Diagnosis.ADHD, AgeGroup.TEEN): DiagnosisNarrative(
        diagnosis=Diagnosis.ADHD,
        age_group=AgeGroup.TEEN,
        template=(
            "Utredningen visar att {{name}} uppfyller kriterierna för ADHD. "
            "{{Subject}} beskriver själv, liksom omgivningen, långvariga svårigheter "
            "att planera, organisera och slutföra uppgifter, samt en inre rastlöshet. "
            "Svårigheterna påverkar {{possessive}} studier, relationer och "
            "självkänsla. {{Subject}} kan ha nytta av stöd i planering, "
            "anpassad studiegång och information om diagnosen så att {{subject}} "
            "själv kan förstå och hantera sina svårigheter."
        ),
    ),
    # =========================================================================
    # Autism
    # =========================================================================
    (Diagnosis.AUTISM, AgeGroup.CHILD): DiagnosisNarrative(
        diagnosis=Diagnosis.AUTISM,
        age_group=AgeGroup.CHILD,
        template=(
            "Utredningen visar att {{name}} uppfyller kriterierna för autism. "
            "{{Subject}} har svårigheter med ömsesidig social kommunikation och "
            "samspel, samt begränsade och repetitiva beteenden och intressen. "
            "{{Subject}} behöver förutsägbarhet, visuellt stöd och vuxna som "
            "anpassar kommunikationen efter {{possessive}} behov. Tidiga insatser "
            "i samarbete med förskolan ger {{object}} bästa möjliga förutsättningar."
        ),
        notice="OBS: texten riktad mot barn som har som mest fyllt 4 år detta år!",
    ),
    (Diagnosis.AUTISM, AgeGroup.TEEN): DiagnosisNarrative(
        diagnosis=Diagnosis.AUTISM,
        age_group=AgeGroup.TEEN,
        template=(
            "Utredningen visar att {{name}} uppfyller kriterierna för autism. "
            "{{Subject}} har sedan barndomen haft svårigheter i socialt samspel och "
            "kommunikation, och ett behov av rutiner och förutsägbarhet. Kraven på "
            "social flexibilitet ökar i tonåren, vilket kan leda till trötthet och "
            "stress för {{object}}. {{Subject}} kan ha nytta av psykoedukation, "
            "anpassningar i skolan och stöd i att hitta strategier som fungerar i "
            "{{possessive}} vardag."
        ),
    ),
    # =========================================================================
    # ADHD and autism
    # =========================================================================
    (Diagnosis.BOTH, AgeGroup.CHILD): DiagnosisNarrative(
        diagnosis=Diagnosis.BOTH,
        age_group=AgeGroup.CHILD,
        template=(
            "Utredningen visar att {{name}} uppfyller kriterierna för både ADHD och "
            "autism. {{Subject}} har svårigheter med uppmärksamhet och impulskontroll "
            "och samtidigt svårigheter i socialt samspel och ett stort behov av "
            "förutsägbarhet. Svårigheterna samverkar och påverkar {{possessive}} "
            "vardag i hög grad. {{Subject}} behöver en tydlig och strukturerad miljö "
            "och vuxna som har kunskap om båda diagnoserna och kan anpassa kraven "
            "efter {{object}}."
        ),
    ),
    (Diagnosis.BOTH, AgeGroup.TEEN): DiagnosisNarrative(
        diagnosis=Diagnosis.BOTH,
        age_group=AgeGroup.TEEN,
        template=(
            "Utredningen visar att {{name}} uppfyller kriterierna för både ADHD och "
            "autism. {{Subject}} har långvariga svårigheter med uppmärksamhet, "
            "planering och impulskontroll, samt svårigheter i socialt samspel och "
            "ett behov av rutiner. Kombinationen gör att {{subject}} lätt blir "
            "överbelastad i skolan och i sociala sammanhang. {{Subject}} kan ha nytta "
            "av psykoedukation om båda diagnoserna, anpassad studiegång och stöd i "
            "att planera {{possessive}} vardag."
        ),
    ),
    # =========================================================================
    # Intellectual disability
    # =========================================================================
    (Diagnosis.INTELLECTUAL_DISABILITY, AgeGroup.CHILD): DiagnosisNarrative(
        diagnosis=Diagnosis.INTELLECTUAL_DISABILITY,
        age_group=AgeGroup.CHILD,
        template=(
            "Utredningen visar att {{name}} har en intellektuell funktionsnedsättning. "
            "{{Subject}} har en begränsad förmåga att ta in, bearbeta och använda ny "
            "information jämfört med jämnåriga, och behöver mer tid och konkret stöd "
            "för att lära sig. {{Possessive}} omgivning behöver anpassa krav och "
            "kommunikation efter {{possessive}} utvecklingsnivå. {{Subject}} har rätt "
            "till anpassad skolgång och stöd enligt LSS."
        ),
    ),
    (Diagnosis.INTELLECTUAL_DISABILITY, AgeGroup.TEEN): DiagnosisNarrative(
        diagnosis=Diagnosis.INTELLECTUAL_DISABILITY,
        age_group=AgeGroup.TEEN,
        template=(
            "Utredningen visar att {{name}} har en intellektuell funktionsnedsättning. "
            "{{Subject}} har svårigheter med abstrakt tänkande, problemlösning och "
            "att generalisera kunskaper till nya situationer. Inför vuxenlivet "
            "behöver {{subject}} stöd i att utveckla sin självständighet utifrån "
            "{{possessive}} förutsättningar. {{Subject}} har rätt till anpassad "
            "skolgång och stöd enligt LSS, och det är viktigt att omgivningen ger "
            "{{object}} information på ett sätt som {{subject}} kan förstå."
        ),
    ),
}
