#!/usr/bin/env python3
"""
Landing page quality scorer.

Scores every page on five weighted categories, grades it against the
quality target and groups the shortfalls into per-category recommendations.
"""

import logging
import math
from typing import Dict, Any, List, Optional

logger = logging.getLogger(__name__)

CATEGORIES = ['performance', 'accessibility', 'seo', 'best_practices', 'mobile_ux']

WEIGHTS = {category: 0.20 for category in CATEGORIES}

TARGETS = {
    'overall': 95,
    'performance': 97,
    'accessibility': 95,
    'seo': 95,
    'best_practices': 96,
    'mobile_ux': 95
}

GRADE_THRESHOLDS = [('A', 95), ('B', 90), ('C', 85), ('D', 80)]

PRIORITY_ORDER = {'High': 3, 'Medium': 2, 'Low': 1}

PAGE_SCORES = [
    {'name': 'Workspace Integration', 'file': 'workspace.html',
     'scores': {'performance': 97, 'accessibility': 94, 'seo': 95, 'best_practices': 96, 'mobile_ux': 93}},
    {'name': 'Research Professional', 'file': 'research.html',
     'scores': {'performance': 98, 'accessibility': 96, 'seo': 96, 'best_practices': 95, 'mobile_ux': 94}},
    {'name': 'Competitor Comparison', 'file': 'comparison.html',
     'scores': {'performance': 96, 'accessibility': 93, 'seo': 94, 'best_practices': 95, 'mobile_ux': 93}},
    {'name': 'Writers Segment', 'file': 'writers.html',
     'scores': {'performance': 95, 'accessibility': 92, 'seo': 93, 'best_practices': 94, 'mobile_ux': 91}},
    {'name': 'Creators Segment', 'file': 'creators.html',
     'scores': {'performance': 96, 'accessibility': 93, 'seo': 94, 'best_practices': 95, 'mobile_ux': 92}},
    {'name': 'Productivity Focus', 'file': 'productivity.html',
     'scores': {'performance': 97, 'accessibility': 94, 'seo': 95, 'best_practices': 96, 'mobile_ux': 93}},
    {'name': 'Future/Aspirational', 'file': 'future.html',
     'scores': {'performance': 98, 'accessibility': 96, 'seo': 96, 'best_practices': 95, 'mobile_ux': 94}},
    {'name': 'Homepage Hub', 'file': 'index.html',
     'scores': {'performance': 96, 'accessibility': 93, 'seo': 94, 'best_practices': 95, 'mobile_ux': 93}},
    {'name': 'Apple-Style Minimalist', 'file': 'apple-style.html',
     'scores': {'performance': 99, 'accessibility': 97, 'seo': 97, 'best_practices': 96, 'mobile_ux': 95}},
    {'name': "Valentine's Day Hook", 'file': 'valentine.html',
     'scores': {'performance': 94, 'accessibility': 91, 'seo': 92, 'best_practices': 93, 'mobile_ux': 90}},
    {'name': 'Operators Segment', 'file': 'operators.html',
     'scores': {'performance': 95, 'accessibility': 92, 'seo': 93, 'best_practices': 94, 'mobile_ux': 92}},
    {'name': 'Automators Segment', 'file': 'automators.html',
     'scores': {'performance': 96, 'accessibility': 93, 'seo': 94, 'best_practices': 95, 'mobile_ux': 93}},
    {'name': 'Trust & Citations', 'file': 'trust.html',
     'scores': {'performance': 97, 'accessibility': 94, 'seo': 95, 'best_practices': 96, 'mobile_ux': 94}}
]

CATEGORY_ACTIONS = {
    'performance': [
        'Optimize images (convert to WebP, add srcset)',
        'Implement lazy loading for below-fold content',
        'Preload critical CSS and fonts',
        'Minify CSS and JavaScript',
        'Enable browser caching'
    ],
    'accessibility': [
        'Add aria-label to all icon-only buttons',
        'Improve focus styles on interactive elements',
        'Add skip-to-content links',
        'Ensure color contrast ratio ≥ 4.5:1',
        'Test with screen readers (NVDA, JAWS)'
    ],
    'seo': [
        'Enhance meta descriptions (150-160 chars)',
        'Optimize title tags (50-60 chars)',
        'Add FAQ schema markup',
        'Implement breadcrumb navigation',
        'Improve internal linking structure'
    ],
    'best_practices': [
        'Update CSP headers to include all CDN sources',
        'Fix console warnings and errors',
        'Add security headers (X-Frame-Options, etc.)',
        'Remove deprecated API usage',
        'Ensure HTTPS for all resources'
    ],
    'mobile_ux': [
        'Increase touch target sizes (≥ 48×48px)',
        'Improve form spacing on mobile',
        'Optimize modal dialogs for small screens',
        'Ensure text legibility (≥ 12px)',
        'Test on multiple devices and browsers'
    ]
}


def round_half_up(value: float, digits: int = 0) -> float:
    """Round .5 away from zero for positive values, tolerating float noise."""
    factor = 10 ** digits
    return math.floor(round(value * factor, 6) + 0.5) / factor


def overall_score(scores: Dict[str, float], weights: Optional[Dict[str, float]] = None) -> int:
    weights = weights or WEIGHTS
    return int(round_half_up(sum(scores[c] * weights[c] for c in CATEGORIES)))


def grade(score: float) -> str:
    for letter, minimum in GRADE_THRESHOLDS:
        if score >= minimum:
            return letter
    return 'F'


def status(score: float, target: float = TARGETS['overall']) -> str:
    if score >= target:
        return 'Meets Target'
    if score >= target - 2:
        return 'Close to Target'
    return 'Below Target'


def improvement_priority(gap: float) -> str:
    if gap >= 3:
        return 'High'
    if gap >= 2:
        return 'Medium'
    return 'Low'


def recommendation_priority(affected_pages: int) -> str:
    if affected_pages >= 5:
        return 'High'
    if affected_pages >= 3:
        return 'Medium'
    return 'Low'


class QualityScorer:
    """Scores the landing pages and summarizes where they fall short."""

    def __init__(self, pages: Optional[List[Dict[str, Any]]] = None,
                 targets: Optional[Dict[str, float]] = None):
        self.pages = pages if pages is not None else PAGE_SCORES
        self.targets = dict(TARGETS)
        if targets:
            self.targets.update(targets)

    def analyze_page(self, page: Dict[str, Any]) -> Dict[str, Any]:
        scores = page['scores']
        overall = overall_score(scores)

        improvements = []
        for category in CATEGORIES:
            target = self.targets[category]
            current = scores[category]
            if current < target:
                gap = target - current
                improvements.append({
                    'category': category,
                    'current': current,
                    'target': target,
                    'gap': gap,
                    'priority': improvement_priority(gap)
                })
        improvements.sort(key=lambda imp: imp['gap'], reverse=True)

        return {
            'name': page['name'],
            'file': page['file'],
            'scores': dict(scores),
            'overall': overall,
            'grade': grade(overall),
            'status': status(overall, self.targets['overall']),
            'improvements': improvements
        }

    def category_averages(self) -> Dict[str, int]:
        if not self.pages:
            return {category: 0 for category in CATEGORIES}
        return {
            category: int(round_half_up(sum(p['scores'][category] for p in self.pages) / len(self.pages)))
            for category in CATEGORIES
        }

    @staticmethod
    def generate_recommendations(page_results: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Group page shortfalls by category, most urgent first."""
        by_category: Dict[str, List[float]] = {}
        for page in page_results:
            for imp in page['improvements']:
                by_category.setdefault(imp['category'], []).append(imp['gap'])

        recommendations = []
        for category, gaps in by_category.items():
            total_gap = sum(gaps)
            recommendations.append({
                'category': category,
                'affected_pages': len(gaps),
                'average_gap': round_half_up(total_gap / len(gaps), 1),
                'total_impact': int(round_half_up(total_gap)),
                'priority': recommendation_priority(len(gaps)),
                'actions': list(CATEGORY_ACTIONS.get(category, []))
            })

        recommendations.sort(key=lambda r: (PRIORITY_ORDER[r['priority']], r['total_impact']), reverse=True)
        return recommendations

    def analyze(self, generated_at: str) -> Dict[str, Any]:
        """Run the full quality analysis and return the report dict."""
        results = [self.analyze_page(page) for page in self.pages]
        overall_scores = [r['overall'] for r in results]
        target = self.targets['overall']

        distribution = {letter: 0 for letter in ('A', 'B', 'C', 'D', 'F')}
        for result in results:
            distribution[result['grade']] += 1

        average = round_half_up(sum(overall_scores) / len(overall_scores), 1) if overall_scores else 0.0

        summary = {
            'total_pages': len(results),
            'average_overall': average,
            'category_averages': self.category_averages(),
            'meets_target': sum(1 for s in overall_scores if s >= target),
            'needs_improvement': sum(1 for s in overall_scores if s < target),
            'grade_distribution': distribution
        }

        logger.info(f"Scored {len(results)} pages, average {average}")

        return {
            'timestamp': generated_at,
            'targets': dict(self.targets),
            'pages': results,
            'summary': summary,
            'recommendations': self.generate_recommendations(results)
        }
