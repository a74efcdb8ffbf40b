"""Shared query fragments, table names and queue backend names."""

WHERE_BY_ID = "id = ?"
WHERE_BY_PLATFORM = "Platform = ?"
WHERE_BY_NAME = "name = ?"
WHERE_BY_USER_ID = "uid = ?"
WHERE_BY_TYPE = "type = ?"
WHERE_BY_RESOURCE_ID = "resource_id = ?"
WHERE_BY_PID = "pid = ?"
WHERE_BY_STATUS = "status = ?"

ORDER_DESC_BY_ID = "id desc"

FUZZY_SEARCH = "%"

GREATER_THAN_CREATED_AT = "created_at > ?"
LESS_THAN_CREATED_AT = "created_at < ?"

RELATION_TABLE_NAME = "relation"
RELATION_COUNT_TABLE_NAME = "relation_count"

FOLLOWING_STATUS = 1

REDIS_MQ_NAME = "redis"
KAFKA_MQ_NAME = "kafka"
ROCKET_MQ_NAME = "rocketmq"
PULSAR_MQ_NAME = "pulsar"

INVALID_PARAM = "无效的参数"