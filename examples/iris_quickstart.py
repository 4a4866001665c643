import logging
from time import perf_counter

from rbdtpy import RBDTClassifier, rules_from_records

# discretized iris attributes: each value belongs to exactly one attribute
attribute_values = {
    0: ["1", "2", "3"],     # petal length
    1: ["4", "5", "6"],     # petal width
    2: ["7", "8", "9"],     # sepal length
    3: ["10", "11", "12"],  # sepal width
}
feats = ["petal_length", "petal_width", "sepal_length", "sepal_width"]

records = [
    {"Y": "setosa", "itemsInX": ["1"], "freqX": 40, "freqY": 50, "freqZ": 40},
    {"Y": "setosa", "itemsInX": ["4"], "freqX": 45, "freqY": 50, "freqZ": 44},
    {"Y": "versicolor", "itemsInX": ["2", "5"], "freqX": 30, "freqY": 50, "freqZ": 28},
    {"Y": "versicolor", "itemsInX": ["2", "8"], "freqX": 25, "freqY": 50, "freqZ": 20},
    {"Y": "virginica", "itemsInX": ["3"], "freqX": 38, "freqY": 50, "freqZ": 37},
    {"Y": "virginica", "itemsInX": ["6", "9"], "freqX": 20, "freqY": 50, "freqZ": 19},
    {"Y": "virginica", "itemsInX": ["2", "6", "12"], "freqX": 6, "freqY": 50, "freqZ": 5},
]
rules = rules_from_records(records, attribute_values)
logging.basicConfig(level=logging.DEBUG)

clf = RBDTClassifier(feature_names=feats, verbose=1)
t0 = perf_counter(); clf.fit(rules); print(f"fit: {perf_counter()-t0:.3f} s")
clf.print_tree()
for r in clf.export_rules():
    print(r)
print(clf.predict([["2", "6", "7", "12"], ["3", "4", "8", "10"]]))
try:
    clf.export_graphviz("iris_rules_tree", format="dot")
except RuntimeError as e:
    print(f"Skipping Graphviz export: {e}")
