"""Localized Portuguese message constants used across the engine and routers."""


class WarningMessages:
    """Non-fatal notes attached to score results."""

    NO_ACTIVE_TABLE: str = "Nenhuma tabela normativa ativa para o instrumento; apenas o escore bruto foi calculado."
    EXPLICIT_TABLE_INACTIVE: str = "A tabela {table_id} não está entre as tabelas ativas do instrumento; usada conforme solicitado."
    STORE_FALLBACK_USED: str = "Falha ao listar tabelas normativas; utilizada a consulta de tabelas gerais."
    STORE_UNAVAILABLE: str = "Base normativa indisponível; percentis não foram calculados."
    COMPANIONS_NOT_FOUND: str = "Tabelas complementares não encontradas; apenas a tabela selecionada foi utilizada."
    SUBSCALE_TABLE_MISSING: str = "Sem tabela normativa para a subescala {subscale}."
    NEGATIVE_RAW_SCORE: str = "Escore bruto negativo em {scale}: resultado inválido."
    GENERAL_SCORE_RECOMPUTED: str = "Escore geral informado ({supplied}) ignorado; recalculado como {computed}."
    TRAFFIC_UNDERAGE: str = "Idade inferior a {min_age} anos em contexto de trânsito."
    AGE_OUTSIDE_NORMS: str = "Idade fora das faixas normativas padrão ({min_age}-{max_age} anos)."
    UNSCHOOLED_GENERAL_TABLE: str = "Não há tabela específica para não escolarizados; utilizada a tabela geral."
    METRIC_NOT_DERIVED: str = "Métrica {metric} não calculada por falta de dados."


class ValidationMessages:
    """Validation feedback texts for raw inputs."""

    INVALID_INPUT: str = "Dados de entrada inválidos"
    UNKNOWN_INSTRUMENT: str = "Instrumento não reconhecido: {instrument}"


class ClassificationMessages:
    NOT_CLASSIFIED: str = "Não classificada"
