# src/main.py
import streamlit as st
import pandas as pd
from typing import List, Set

from algorithms.apriori import Rule
from config import ConfigError, DEFAULT_MIN_CONFIDENCE_PERCENT, DEFAULT_MIN_SUPPORT_PERCENT, MiningConfig
from data_io import basic_stats, df_to_transactions, frequent_table_to_df, load_transactions_csv, rules_to_df
from pipeline import run_apriori
from preprocessing.preprocess import preprocess_transactions
from presentation import confidence_percent, format_itemset, format_rule

SAMPLE_TRANSACTIONS = "Milk Bread\nBread Diaper\nMilk Bread Diaper\nMilk Diaper\n"


# ---------- Helper ----------
def transactions_to_df(transactions: List[Set[str]]) -> pd.DataFrame:
    rows = []
    for tid, items in enumerate(transactions, start=1):
        rows.append({"tid": tid, "items": ", ".join(sorted(items))})
    return pd.DataFrame(rows, columns=["tid", "items"])


def rules_for_item(rules: List[Rule], item: str) -> List[Rule]:
    filtered = [r for r in rules if item in r.antecedent]
    # sort by confidence, then support
    filtered.sort(key=lambda r: (r.confidence, r.support), reverse=True)
    return filtered


# ---------- Streamlit App ----------
st.set_page_config(page_title="Market Basket Analysis", layout="wide")

st.title("Market Basket Analysis with Apriori")

st.markdown("""
This app lets you:
1. Enter transactions (one basket per line) or import them from CSV
2. Tokenize and clean the baskets
3. Run **Apriori** to find frequent itemsets and association rules
4. Look up which products are bought together
""")

# Sidebar: parameters
st.sidebar.header("Algorithm Parameters")
min_support_pct = st.sidebar.slider("Minimum Support (%)", 0.0, 100.0, DEFAULT_MIN_SUPPORT_PERCENT, 1.0)
min_confidence_pct = st.sidebar.slider("Minimum Confidence (%)", 0.0, 100.0, DEFAULT_MIN_CONFIDENCE_PERCENT, 1.0)
lowercase = st.sidebar.checkbox("Lowercase item names", value=False)

tab1, tab2, tab3, tab4 = st.tabs([
    "1. Transactions",
    "2. Preprocessing",
    "3. Association Mining",
    "4. Recommendations",
])

# ---------- TAB 1: Transactions ----------
with tab1:
    st.header("Transactions")
    text = st.text_area(
        "One transaction per line, items separated by spaces:",
        value=st.session_state.get("raw_text", SAMPLE_TRANSACTIONS),
        height=200,
    )
    st.session_state.raw_text = text

    st.markdown("---")
    st.header("CSV Data Import")
    uploaded = st.file_uploader("Upload a transactions CSV", type=["csv"])
    if uploaded is not None:
        try:
            imported = df_to_transactions(load_transactions_csv(uploaded))
            st.session_state.raw_text = "\n".join(" ".join(sorted(t)) for t in imported)
            st.success(f"Imported {len(imported)} transactions from CSV.")
        except (ValueError, KeyError) as e:
            st.error(f"Error reading CSV: {e}")

    raw_lines = st.session_state.raw_text.splitlines()
    st.write(f"{len(raw_lines)} transaction lines entered.")

# ---------- TAB 2: Preprocessing ----------
with tab2:
    st.header("Data Preprocessing")
    if st.button("Run Preprocessing"):
        cleaned, report = preprocess_transactions(st.session_state.raw_text.splitlines(), lowercase)
        st.session_state.cleaned_transactions = cleaned
        st.session_state.preprocessing_report = report
        st.success("Preprocessing completed.")

    if "preprocessing_report" in st.session_state:
        st.subheader("Preprocessing Report")
        st.text(st.session_state.preprocessing_report)

        cleaned = st.session_state.cleaned_transactions
        st.subheader("Cleaned Transactions")
        st.write(basic_stats(cleaned))
        st.dataframe(transactions_to_df(cleaned))
    else:
        st.info("Click 'Run Preprocessing' to tokenize the baskets.")

# ---------- TAB 3: Association Mining ----------
with tab3:
    st.header("Apriori: Frequent Itemsets and Rules")
    cleaned = st.session_state.get("cleaned_transactions")
    if cleaned is None:
        st.warning("Please run preprocessing first (Tab 2).")
    else:
        if st.button("Run Apriori"):
            try:
                st.session_state.apriori_result = run_apriori(
                    cleaned, MiningConfig(min_support_pct, min_confidence_pct)
                )
            except ConfigError as e:
                st.error(str(e))

        result = st.session_state.get("apriori_result")
        if result is None:
            st.info("Run Apriori to see the results.")
        else:
            col1, col2, col3 = st.columns(3)
            col1.metric("Min support count", result.min_support_count)
            col2.metric("Rules", len(result.rules))
            col3.metric("Execution Time (ms)", round(result.elapsed * 1000, 2))

            st.subheader("Frequent Itemsets")
            if result.frequent_itemsets:
                st.dataframe(frequent_table_to_df(result.frequent_itemsets))
            else:
                st.info("No frequent itemsets. Try lowering the minimum support.")

            st.subheader("Association Rules")
            if result.rules:
                df_rules = rules_to_df(result.rules)
                df_rules["confidence"] = [f"{confidence_percent(c)}%" for c in df_rules["confidence"]]
                st.dataframe(df_rules)
                with st.expander("Show rules as text"):
                    st.text("\n".join(format_rule(r) for r in result.rules))
            else:
                st.info("No rules meet the thresholds.")

# ---------- TAB 4: Recommendations ----------
with tab4:
    st.header("Product Recommendations")
    result = st.session_state.get("apriori_result")
    if result is None or not result.rules:
        st.info("Run Apriori in Tab 3 and get at least one rule before using recommendations.")
    else:
        all_items = sorted({i for k in result.frequent_itemsets.get(1, {}) for i in k})
        selected_item = st.selectbox("Select a product:", all_items)
        if selected_item:
            rel_rules = rules_for_item(result.rules, selected_item)
            if not rel_rules:
                st.info("No strong associations found for this item with the current thresholds.")
            else:
                st.subheader(f"Customers who bought **{selected_item}** also bought:")
                for r in rel_rules[:10]:
                    conf_pct = confidence_percent(r.confidence)
                    bar = "█" * (conf_pct // 5)
                    st.markdown(
                        f"- **{format_itemset(r.consequent)}** with {format_itemset(r.antecedent)}: "
                        f"{conf_pct}% of the time (support {r.support})  {bar}"
                    )
