from plantpal.agent.deps import SymptomRequest
from plantpal.agent.models import DiagnosisReport, DiseaseInfo


output = DiagnosisReport(
    possible_diseases=[
        DiseaseInfo(
            disease_name="Septoria Leaf Spot",
            description=(
                "A fungal disease that causes small, round spots with dark brown edges and lighter centers, "
                "usually starting on the lower leaves. Infected leaves turn yellow and drop."
            ),
            remedies=[
                "Remove and dispose of all spotted leaves. Do not compost them.",
                "Water at the base of the plant in the morning so foliage stays dry.",
                "Apply a copper-based or chlorothalonil fungicide every 7-10 days while symptoms persist.",
            ],
            prevention=[
                "Space plants to improve air circulation.",
                "Mulch around the base to stop soil splashing onto leaves.",
                "Rotate crops and clear plant debris at the end of the season.",
            ],
        ),
        DiseaseInfo(
            disease_name="Early Blight",
            description=(
                "Caused by Alternaria fungi. Brown spots with concentric rings (target pattern) surrounded "
                "by yellow tissue, mostly on older leaves."
            ),
            remedies=[
                "Prune affected lower leaves.",
                "Apply an organic fungicide such as Bacillus subtilis or copper spray.",
            ],
            prevention=[
                "Avoid overhead watering.",
                "Feed the plant regularly; stressed plants are more susceptible.",
            ],
        ),
    ],
    summary=(
        "Your plant most likely has a fungal leaf spot. It is very treatable: remove the affected leaves, "
        "keep the foliage dry, and treat with a fungicide. With a little care it should bounce back."
    ),
)


class SampleDiagnoser:
    """Offline stand-in for GeminiDiagnoser that always returns the sample report."""

    def __init__(self, report: DiagnosisReport = output):
        self.report = report
        self.requests = []

    async def diagnose(self, request: SymptomRequest) -> DiagnosisReport:
        self.requests.append(request)
        return self.report
