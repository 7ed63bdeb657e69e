"""Portuguese interpretation texts for the palographic test.

Threshold logic lives in :mod:`psiconorm.services.interpretation`; this
module only holds wording so it can be reviewed by psychologists without
reading code.
"""


class ProductivityTexts:
    EXCEPTIONAL: str = "Rendimento muito superior, capacidade de produção excepcional. Indivíduo altamente produtivo."
    ABOVE_AVERAGE: str = "Rendimento acima da média. Bom desempenho em atividades produtivas."
    AVERAGE: str = "Rendimento dentro dos padrões médios esperados."
    BELOW_AVERAGE: str = "Rendimento abaixo da média. Menor capacidade de produção."
    DEFICIENT: str = "Rendimento muito abaixo da média. Capacidade de produção deficiente."


class RhythmTexts:
    BALANCED: str = "Bom equilíbrio rítmico. Possibilidade de acelerar rendimento sem perda de controle."
    SLIGHT_INSTABILITY: str = "Ligeiros sintomas de instabilidade. Rapidez com baixa qualidade de execução."
    IRREGULAR: str = "Irregularidade clara nas tarefas. Falta de controle e instabilidade emocional significativa."
    RIGID: str = "Alta regularidade. Possível tendência à rigidez no comportamento."
    NORMAL: str = "Ritmo dentro dos padrões normais."


class SizeTexts:
    MISSING: str = "Tamanho não informado."
    VERY_LARGE: str = "Tamanho muito aumentado. Indica expansividade acentuada e possível exibicionismo."
    LARGE: str = "Tamanho aumentado. Sugere segurança, generosidade e confiança em si."
    NORMAL: str = "Tamanho normal. Equilíbrio e ponderação nas atitudes."
    SMALL: str = "Tamanho pequeno. Revela introversão, concentração e minuciosidade."
    VERY_SMALL: str = "Tamanho muito pequeno. Indica inibição e sentimento de inadequação."


class DistanceTexts:
    MISSING: str = "Distância não informada."
    VERY_WIDE: str = "Distância muito ampla. Indica necessidade de espaço e distanciamento."
    WIDE: str = "Distância ampla. Sugere necessidade de espaço pessoal."
    NORMAL: str = "Distância normal. Padrão de proximidade adequado."
    NARROW: str = "Distância estreita. Indica necessidade de proximidade."
    VERY_NARROW: str = "Distância muito estreita. Pode indicar dependência ou invasão de espaço."


class ImpulsivityTexts:
    MISSING: str = "Impulsividade não calculada."
    HIGH: str = "Alta impulsividade. Grande variação no tamanho dos traços indica instabilidade emocional."
    MODERATE: str = "Impulsividade moderada. Alguma variação no controle motor."
    LOW: str = "Impulsividade baixa. Bom controle motor e estabilidade."


class EmotivityTexts:
    VERY_HIGH: str = "Emotividade muito elevada. Muitas irregularidades indicam instabilidade emocional significativa."
    HIGH: str = "Emotividade elevada. Presença de irregularidades que indicam desequilíbrio emocional."
    MODERATE: str = "Emotividade moderada. Algumas irregularidades presentes."
    MILD: str = "Emotividade leve. Poucas irregularidades."
    CONTROLLED: str = "Emotividade controlada. Ausência de irregularidades significativas."


class ContextSummaryTexts:
    TRAFFIC: str = "No contexto de trânsito, o padrão de {productivity} com {rhythm} sugere {verdict}."
    TRAFFIC_HIGH_PRODUCTIVITY: str = "alta produtividade"
    TRAFFIC_LOW_PRODUCTIVITY: str = "produtividade reduzida"
    TRAFFIC_STABLE: str = "ritmo estável"
    TRAFFIC_UNSTABLE: str = "ritmo instável"
    TRAFFIC_FIT: str = "aptidão adequada para condução"
    TRAFFIC_REVIEW: str = "necessidade de atenção e possível reavaliação"

    OCCUPATIONAL: str = "Para contexto ocupacional, os resultados indicam {productivity} com {stability}."
    OCCUPATIONAL_HIGH: str = "capacidade produtiva elevada"
    OCCUPATIONAL_MODERATE: str = "capacidade produtiva moderada"
    OCCUPATIONAL_STABLE: str = "estabilidade emocional adequada"
    OCCUPATIONAL_UNSTABLE: str = "instabilidade que requer acompanhamento"

    CLINICAL: str = "Clinicamente, a análise revela padrões de comportamento expressivo consistente com {balance}."
    CLINICAL_UNSTABLE: str = "instabilidade emocional"
    CLINICAL_BALANCED: str = "equilíbrio emocional adequado"
