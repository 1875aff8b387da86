import logging
import os

from dotenv import load_dotenv

from stlpipeline import params

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(levelname)s - %(message)s",
)

#if __name__=='__main__':

series = [
    5.0, 9.0, 2.0, 9.0, 0.0, 6.0, 3.0, 8.0, 5.0, 8.0,
    7.0, 8.0, 8.0, 0.0, 2.0, 5.0, 0.0, 5.0, 6.0, 7.0,
    3.0, 6.0, 1.0, 4.0, 4.0, 4.0, 3.0, 7.0, 5.0, 8.0,
]
period = int(os.getenv("STL_DEMO_PERIOD", "7"))

result = params().fit(series, period)
for value in result.trend:
    print(value)
