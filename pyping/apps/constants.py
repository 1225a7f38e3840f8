# Компонента, которая добавляется к префиксу: ndn:/name/prefix/ping
PING_COMPONENT = 'ping'

# Содержимое ответа сервера
PING_ACK = b'ping ack'

# Клиент
PING_MIN_INTERVAL = 0.1         # минимальный интервал между запросами, с
DEFAULT_INTERVAL = 1.0          # интервал по-умолчанию, с
RANDOM_NUMBER_LIMIT = 2 ** 31   # случайные номера берутся из [0, 2^31)
CLIENT_STEP_MS = 10             # таймаут одного шага транспорта у клиента

# Сервер
DEFAULT_FRESHNESS = 1           # FreshnessSeconds по-умолчанию
SERVER_STEP_MS = 100            # таймаут одного шага транспорта у сервера
